"""Invoice form validation.

Every field is checked on every submission so the form can show all problems
at once. Each field has a single user-facing message regardless of which
underlying check failed.
"""

from typing import Any, Mapping

from pydantic import ValidationError

from invoicing.models import InvoiceForm
from invoicing.results import ValidationFailure

FORM_FIELDS = ("customerId", "amount", "status", "receiptId")

FIELD_MESSAGES = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
    "receiptId": "Please choose a valid receipt.",
}

# Shown instead of the amount message when the amount exceeds MAX_AMOUNT
AMOUNT_TOO_LARGE_MESSAGE = "Please enter an amount no greater than $21,474,836.47."

# Error locations may use either the model field name or the form alias
_FORM_NAMES = {
    "customer_id": "customerId",
    "receipt_id": "receiptId",
}


def _form_field(loc: tuple) -> str | None:
    if not loc:
        return None
    name = str(loc[0])
    return _FORM_NAMES.get(name, name)


def _message(name: str, error_type: str) -> str:
    if name == "amount" and error_type == "less_than_equal":
        return AMOUNT_TOO_LARGE_MESSAGE
    return FIELD_MESSAGES[name]


def collect_field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Map a pydantic error to {form field: [message]} in form field order."""
    messages: dict[str, str] = {}
    for error in exc.errors():
        name = _form_field(error["loc"])
        if name in FIELD_MESSAGES:
            messages.setdefault(name, _message(name, error["type"]))
    return {name: [messages[name]] for name in FORM_FIELDS if name in messages}


def validate_invoice_form(
    data: Mapping[str, Any],
    action: str,
) -> InvoiceForm | ValidationFailure:
    """
    Validate raw invoice form data.

    Args:
        data: Form mapping with customerId, amount, status, receiptId
        action: "Create" or "Update", used in the summary message

    Returns:
        Normalized InvoiceForm, or ValidationFailure listing every bad field
    """
    payload = {name: data.get(name) for name in FORM_FIELDS if data.get(name) is not None}

    try:
        return InvoiceForm.model_validate(payload)
    except ValidationError as e:
        return ValidationFailure(
            errors=collect_field_errors(e),
            message=f"Missing Fields. Failed to {action} Invoice.",
        )
