"""
S3 client for receipt uploads.

The application never receives receipt bytes. It only issues a pre-signed
POST policy; the browser sends the file straight to the bucket and the
resulting object key is submitted with the invoice form.
"""

import logging
from typing import Any, Dict
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Object key suffix per accepted receipt type
_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
}


class StorageConfig(BaseModel):
    """Receipt bucket configuration."""

    bucket_name: str = Field(..., min_length=3, max_length=63)
    region: str = Field(..., min_length=1, description="AWS region, e.g. us-east-1")
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Largest receipt accepted by the upload policy",
        ge=1,
        le=100 * 1024 * 1024,
    )
    upload_expiry_seconds: int = Field(
        default=600,
        description="How long a pre-signed upload stays valid",
        ge=60,
        le=3600,
    )


class StorageError(Exception):
    """S3 could not issue an upload policy."""


class StorageClient:
    """Issues pre-signed POST policies for receipt images."""

    def __init__(
        self,
        config: StorageConfig,
        s3_client: Any | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
    ):
        self._config = config
        self._s3 = s3_client or boto3.client(
            "s3",
            region_name=config.region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    @property
    def config(self) -> StorageConfig:
        return self._config

    def new_key(self, content_type: str) -> str:
        """
        Generate a fresh object key for an upload.

        Raises:
            ValueError: If content type is not an accepted receipt image
        """
        extension = _EXTENSIONS.get(content_type)
        if extension is None:
            raise ValueError(
                f"Unsupported receipt type '{content_type}'. "
                f"Allowed: {', '.join(sorted(_EXTENSIONS))}"
            )
        return f"{uuid4()}{extension}"

    def presign_upload(self, filename: str, content_type: str) -> Dict[str, Any]:
        """
        Create a pre-signed POST for one receipt.

        Args:
            filename: Original file name (logged only, never part of the key)
            content_type: MIME type the upload must carry

        Returns:
            {"url": ..., "fields": {...}} where fields include the object "key"

        Raises:
            ValueError: If content type is not accepted
            StorageError: If S3 rejects the request
        """
        key = self.new_key(content_type)

        try:
            post = self._s3.generate_presigned_post(
                Bucket=self._config.bucket_name,
                Key=key,
                Fields={"Content-Type": content_type},
                Conditions=[
                    {"Content-Type": content_type},
                    ["content-length-range", 0, self._config.max_upload_bytes],
                ],
                ExpiresIn=self._config.upload_expiry_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to pre-sign upload for {filename}: {e}")
            raise StorageError(f"Could not create upload for {filename}") from e

        logger.info(f"Pre-signed receipt upload {key} for {filename}")
        return {"url": post["url"], "fields": post["fields"]}
