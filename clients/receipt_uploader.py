"""
Two-phase receipt upload, as performed by the invoice form.

1. Ask the app for a pre-signed upload (POST /api/upload).
2. POST the provider's form fields plus the file straight to the bucket.

The object key from step 1 is what the invoice stores as receiptId. Any
failure raises ReceiptUploadError so the form never saves a key whose bytes
did not arrive.
"""

import logging
from dataclasses import dataclass, field

import requests

logger = logging.getLogger(__name__)


class ReceiptUploadError(Exception):
    """Receipt could not be uploaded. The invoice must not be saved with it."""


@dataclass(frozen=True)
class ReceiptFile:
    """A receipt image chosen in the form."""

    filename: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class UploadDescriptor:
    """Pre-signed upload target returned by /api/upload."""

    url: str
    fields: dict[str, str] = field(default_factory=dict)

    @property
    def key(self) -> str | None:
        return self.fields.get("key")


class ReceiptUploader:
    """Uploads receipt images via the app's pre-signed upload endpoint."""

    DESCRIPTOR_TIMEOUT = 10
    UPLOAD_TIMEOUT = 60

    def __init__(self, base_url: str, session: requests.Session | None = None):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    def request_upload(self, receipt: ReceiptFile) -> UploadDescriptor:
        """
        Request a pre-signed upload for the receipt.

        Raises:
            ReceiptUploadError: If the endpoint fails or returns no object key
        """
        try:
            response = self._session.post(
                f"{self.base_url}/api/upload",
                json={"filename": receipt.filename, "contentType": receipt.content_type},
                timeout=self.DESCRIPTOR_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Upload descriptor request failed: {e}")
            raise ReceiptUploadError(f"Connection failed: {e}") from e

        if not response.ok:
            logger.error(f"Failed to get pre-signed URL: {response.status_code} {response.text}")
            raise ReceiptUploadError("Failed to get pre-signed URL.")

        try:
            body = response.json()
            descriptor = UploadDescriptor(url=body["url"], fields=dict(body["fields"]))
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Malformed upload descriptor: {response.text}")
            raise ReceiptUploadError("Malformed upload descriptor") from e

        if not descriptor.key:
            raise ReceiptUploadError("Upload descriptor has no object key")

        return descriptor

    def upload(self, descriptor: UploadDescriptor, receipt: ReceiptFile) -> None:
        """
        Send the file bytes directly to storage.

        Raises:
            ReceiptUploadError: If storage does not accept the upload
        """
        try:
            response = self._session.post(
                descriptor.url,
                data=descriptor.fields,
                files={"file": (receipt.filename, receipt.content, receipt.content_type)},
                timeout=self.UPLOAD_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Storage upload of {descriptor.key} failed: {e}")
            raise ReceiptUploadError(f"Connection failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Storage rejected {descriptor.key}: {response.status_code} {response.text}")
            raise ReceiptUploadError(f"Storage upload failed with status {response.status_code}")

        logger.info(f"Uploaded receipt {descriptor.key} ({len(receipt.content)} bytes)")

    def upload_receipt(self, receipt: ReceiptFile) -> str:
        """
        Run both phases and return the stored object key.

        Raises:
            ReceiptUploadError: If either phase fails
        """
        descriptor = self.request_upload(receipt)
        self.upload(descriptor, receipt)
        return descriptor.key
