"""
Invoice form controller.

Drives the create and edit forms against the HTTP API the way the browser
does: upload the receipt (if one was chosen), post the form fields, then
either follow the redirect or render the returned errors. Each stage gets
its inputs by value; nothing is kept on the controller between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Union
from uuid import UUID, uuid4

import requests

from clients.receipt_uploader import ReceiptFile, ReceiptUploadError, ReceiptUploader

logger = logging.getLogger(__name__)

RECEIPT_UPLOAD_MESSAGE = "Failed to upload receipt."


@dataclass(frozen=True)
class FormSubmission:
    """One press of the submit button.

    invoice_id is fixed when the submission is built, so re-sending the same
    submission cannot create a second invoice.
    """

    fields: Mapping[str, str]
    receipt: ReceiptFile | None = None
    invoice_id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class Navigate:
    """Submission succeeded; go to location."""

    location: str


@dataclass(frozen=True)
class Render:
    """Stay on the form and show state ({errors, message})."""

    state: dict[str, Any]


FormOutcome = Union[Navigate, Render]


class InvoiceFormController:
    """Submits invoice forms to the app and interprets the responses."""

    FORM_TIMEOUT = 60

    def __init__(
        self,
        base_url: str,
        uploader: ReceiptUploader,
        session: requests.Session | None = None,
    ):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self._uploader = uploader
        self._session = session or requests.Session()

    def submit_create(self, submission: FormSubmission) -> FormOutcome:
        """Upload the receipt if any, then create the invoice."""
        try:
            receipt_id = self._upload(submission.receipt, fallback="")
        except ReceiptUploadError:
            return self._upload_failed("Create")

        payload = {
            **submission.fields,
            "receiptId": receipt_id,
            "invoiceId": str(submission.invoice_id),
        }
        return self._post_form("/dashboard/invoices/create", payload, "Create")

    def submit_update(
        self,
        invoice_id: UUID,
        submission: FormSubmission,
        current_receipt_id: str | None = None,
        remove_receipt: bool = False,
    ) -> FormOutcome:
        """
        Upload a replacement receipt if any, then update the invoice.

        With no new file the current receipt key is sent back unchanged, so
        the receipt survives the edit. remove_receipt=True clears it.
        """
        fallback = "" if remove_receipt else (current_receipt_id or "")

        try:
            receipt_id = self._upload(submission.receipt, fallback=fallback)
        except ReceiptUploadError:
            return self._upload_failed("Update")

        payload = {**submission.fields, "receiptId": receipt_id}
        return self._post_form(f"/dashboard/invoices/{invoice_id}/edit", payload, "Update")

    def delete(self, invoice_id: UUID) -> Render:
        """Delete an invoice. Never navigates."""
        outcome = self._post_form(f"/dashboard/invoices/{invoice_id}/delete", {}, "Delete")
        if isinstance(outcome, Navigate):
            return Render({"message": None})
        return outcome

    def _upload(self, receipt: ReceiptFile | None, fallback: str) -> str:
        if receipt is None:
            return fallback
        return self._uploader.upload_receipt(receipt)

    def _upload_failed(self, action: str) -> Render:
        logger.warning(f"Receipt upload failed; invoice {action.lower()} aborted")
        return Render({
            "errors": {"receiptId": [RECEIPT_UPLOAD_MESSAGE]},
            "message": f"Upload Error: Failed to {action} Invoice.",
        })

    def _post_form(self, path: str, payload: dict[str, str], action: str) -> FormOutcome:
        try:
            response = self._session.post(
                f"{self.base_url}{path}",
                data=payload,
                allow_redirects=False,
                timeout=self.FORM_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Invoice {action.lower()} request failed: {e}")
            return Render({"message": f"Database Error: Failed to {action} Invoice."})

        if response.is_redirect:
            return Navigate(response.headers["Location"])

        try:
            state = response.json()
        except ValueError:
            logger.error(f"Non-JSON response from {path}: {response.status_code}")
            return Render({"message": f"Database Error: Failed to {action} Invoice."})

        return Render(state)
