"""Invoice pages: cached reads and form mutations under /dashboard/invoices."""

from uuid import UUID

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from api.base import success_response
from clients.storage_client import StorageConfig
from invoicing.receipts import receipt_url
from invoicing.results import MutationResult, Ok, ValidationFailure
from invoicing.services.invoice_service import InvoiceService
from invoicing.view_cache import INVOICES_PATH, ViewCache


def _parse_id(value: str) -> UUID:
    try:
        return UUID(value)
    except (ValueError, TypeError):
        raise ValueError(f"'{value}' is not a valid invoice id")


def _form_response(result: MutationResult):
    """Navigate to the invoice list on success, otherwise hand back the form state."""
    if isinstance(result, Ok):
        return RedirectResponse(INVOICES_PATH, status_code=status.HTTP_303_SEE_OTHER)
    if isinstance(result, ValidationFailure):
        return JSONResponse(status_code=400, content=result.to_state())
    return JSONResponse(status_code=500, content=result.to_state())


def create_invoices_router(
    invoice_service: InvoiceService,
    view_cache: ViewCache,
    storage_config: StorageConfig,
) -> APIRouter:
    router = APIRouter(prefix=INVOICES_PATH, tags=["invoices"])

    def _serialize(invoice) -> dict:
        data = invoice.model_dump(mode="json")
        data["receipt_url"] = (
            receipt_url(invoice.receipt_id, storage_config.bucket_name, storage_config.region)
            if invoice.receipt_id
            else None
        )
        return data

    @router.get("")
    async def list_invoices(request: Request):
        data = view_cache.get(INVOICES_PATH)
        if data is None:
            generation = view_cache.generation(INVOICES_PATH)
            data = [_serialize(i) for i in invoice_service.list_all()]
            view_cache.put(INVOICES_PATH, data, generation)
        return success_response(data, getattr(request.state, "request_id", None)).model_dump(mode="json")

    @router.get("/{invoice_id}")
    async def get_invoice(request: Request, invoice_id: str):
        path = f"{INVOICES_PATH}/{invoice_id}"
        data = view_cache.get(path)
        if data is None:
            generation = view_cache.generation(path)
            invoice = invoice_service.get_by_id(_parse_id(invoice_id))
            if invoice is None:
                raise ValueError(f"Invoice {invoice_id} not found")
            data = _serialize(invoice)
            view_cache.put(path, data, generation)
        return success_response(data, getattr(request.state, "request_id", None)).model_dump(mode="json")

    @router.post("/create")
    async def create_invoice(request: Request):
        form = await request.form()
        invoice_id = _parse_id(form["invoiceId"]) if form.get("invoiceId") else None
        return _form_response(invoice_service.create(form, invoice_id))

    @router.post("/{invoice_id}/edit")
    async def update_invoice(request: Request, invoice_id: str):
        form = await request.form()
        return _form_response(invoice_service.update(_parse_id(invoice_id), form))

    @router.post("/{invoice_id}/delete")
    async def delete_invoice(invoice_id: str):
        result = invoice_service.delete(_parse_id(invoice_id))
        status_code = 200 if isinstance(result, Ok) else 500
        return JSONResponse(status_code=status_code, content=result.to_state())

    return router
