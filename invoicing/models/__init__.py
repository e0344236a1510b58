"""Invoicing domain models."""

from invoicing.models.invoice import Invoice, InvoiceForm, InvoiceStatus

__all__ = [
    "Invoice", "InvoiceForm", "InvoiceStatus",
]
