"""Pre-signed receipt uploads: POST /api/upload."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from clients.storage_client import StorageClient


class UploadRequest(BaseModel):
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., alias="contentType", min_length=1)

    model_config = {"populate_by_name": True}


def create_uploads_router(storage: StorageClient) -> APIRouter:
    router = APIRouter(tags=["uploads"])

    @router.post("/upload")
    async def create_upload(body: UploadRequest):
        """Return {url, fields} for a direct browser-to-bucket upload."""
        return storage.presign_upload(body.filename, body.content_type)

    return router
