"""
Application assembly.

create_app wires already-built services into a FastAPI app (tests use this).
build_app resolves secrets from Vault and builds the real services:

    uvicorn --factory main:build_app
"""

import logging

from fastapi import FastAPI

from api.errors import register_error_handlers
from api.invoices import create_invoices_router
from api.middleware import RequestIDMiddleware
from api.uploads import create_uploads_router
from auth.api import create_auth_router
from auth.config import AuthConfig
from auth.database import AuthDatabase
from auth.security_middleware import AuthMiddleware
from auth.service import AuthService
from auth.session import SessionManager
from clients.postgres_client import PostgresClient
from clients.storage_client import StorageClient, StorageConfig
from clients.valkey_client import ValkeyClient
from clients.vault_client import get_database_url, get_storage_config, get_valkey_url
from invoicing.services.invoice_service import InvoiceService
from invoicing.view_cache import ViewCache

logger = logging.getLogger(__name__)


def create_app(
    auth_service: AuthService,
    session_manager: SessionManager,
    auth_config: AuthConfig,
    invoice_service: InvoiceService,
    view_cache: ViewCache,
    storage: StorageClient,
) -> FastAPI:
    """FastAPI app with auth, error handlers, invoice and upload routes."""
    app = FastAPI(title="Invoices")
    # Outermost last: request IDs are assigned before auth can reject
    app.add_middleware(AuthMiddleware, session_manager=session_manager)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_auth_router(auth_service, auth_config))
    app.include_router(create_invoices_router(invoice_service, view_cache, storage.config))
    app.include_router(create_uploads_router(storage), prefix="/api")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def build_app() -> FastAPI:
    """Build the production app. Fails fast if any backing service is unreachable."""
    postgres = PostgresClient(get_database_url())
    valkey = ValkeyClient(get_valkey_url())

    auth_config = AuthConfig()
    session_manager = SessionManager(valkey, auth_config)
    auth_service = AuthService(auth_config, AuthDatabase(postgres), session_manager)

    view_cache = ViewCache(valkey)
    invoice_service = InvoiceService(postgres, view_cache)

    storage_secrets = get_storage_config()
    storage = StorageClient(
        StorageConfig(
            bucket_name=storage_secrets["bucket_name"],
            region=storage_secrets["region"],
        ),
        access_key_id=storage_secrets["access_key_id"],
        secret_access_key=storage_secrets["secret_access_key"],
    )

    logger.info("Invoice app services ready")
    return create_app(
        auth_service=auth_service,
        session_manager=session_manager,
        auth_config=auth_config,
        invoice_service=invoice_service,
        view_cache=view_cache,
        storage=storage,
    )
