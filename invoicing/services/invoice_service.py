"""
Invoice service: validated create, update and delete against the invoices table.

Mutations return a MutationResult instead of raising. Validation runs before
any SQL; database errors are logged and reported with a fixed message. After
a successful write the cached invoice list is revalidated.
"""

import logging
from typing import Any, Mapping
from uuid import UUID, uuid4

import psycopg2

from clients.postgres_client import PostgresClient
from invoicing.models import Invoice
from invoicing.results import MutationResult, Ok, PersistenceFailure, ValidationFailure
from invoicing.validation import validate_invoice_form
from invoicing.view_cache import INVOICES_PATH, ViewCache
from utils.timezone import today_utc

logger = logging.getLogger(__name__)

_COLUMNS = "id, customer_id, amount, status, receipt_id, date"


class InvoiceService:
    """Service for invoice operations."""

    def __init__(self, postgres: PostgresClient, view_cache: ViewCache):
        self.postgres = postgres
        self.view_cache = view_cache

    def create(self, form: Mapping[str, Any], invoice_id: UUID | None = None) -> MutationResult:
        """
        Create an invoice from form data.

        The insert is a no-op when a row with the same id already exists, so a
        form submitted twice with the same invoice_id produces one row.

        Args:
            form: Raw form fields (customerId, amount, status, receiptId)
            invoice_id: Id chosen by the form; generated when omitted

        Returns:
            Ok(invoice_id), ValidationFailure or PersistenceFailure
        """
        validated = validate_invoice_form(form, "Create")
        if isinstance(validated, ValidationFailure):
            logger.info(f"Invoice create rejected: {sorted(validated.errors)}")
            return validated

        invoice_id = invoice_id or uuid4()
        created_on = today_utc()

        try:
            if not validated.has_receipt:
                rows = self.postgres.execute_returning(
                    """
                    INSERT INTO invoices (id, customer_id, amount, status, date)
                    VALUES (%s, %s, %s, %s, %s)
                    ON CONFLICT (id) DO NOTHING
                    RETURNING id
                    """,
                    (invoice_id, validated.customer_id, validated.amount_cents,
                     validated.status.value, created_on)
                )
            else:
                rows = self.postgres.execute_returning(
                    """
                    INSERT INTO invoices (id, customer_id, amount, status, receipt_id, date)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    ON CONFLICT (id) DO NOTHING
                    RETURNING id
                    """,
                    (invoice_id, validated.customer_id, validated.amount_cents,
                     validated.status.value, validated.receipt_id, created_on)
                )
        except psycopg2.Error:
            logger.exception(f"Failed to create invoice {invoice_id}")
            return PersistenceFailure("Database Error: Failed to Create Invoice.")

        if rows:
            logger.info(f"Created invoice {invoice_id} ({validated.amount_cents} cents)")
        else:
            logger.info(f"Invoice {invoice_id} already exists, duplicate submission ignored")

        self.view_cache.revalidate(INVOICES_PATH)
        return Ok(invoice_id)

    def update(self, invoice_id: UUID, form: Mapping[str, Any]) -> MutationResult:
        """
        Update an invoice from form data.

        The creation date never changes. An empty receiptId clears the stored
        receipt; callers keeping the current receipt must send its key.

        Returns:
            Ok(invoice_id), ValidationFailure or PersistenceFailure
        """
        validated = validate_invoice_form(form, "Update")
        if isinstance(validated, ValidationFailure):
            logger.info(f"Invoice {invoice_id} update rejected: {sorted(validated.errors)}")
            return validated

        try:
            if validated.has_receipt:
                self.postgres.execute(
                    """
                    UPDATE invoices
                    SET customer_id = %s, amount = %s, status = %s, receipt_id = %s
                    WHERE id = %s
                    """,
                    (validated.customer_id, validated.amount_cents, validated.status.value,
                     validated.receipt_id, invoice_id)
                )
            else:
                self.postgres.execute(
                    """
                    UPDATE invoices
                    SET customer_id = %s, amount = %s, status = %s, receipt_id = NULL
                    WHERE id = %s
                    """,
                    (validated.customer_id, validated.amount_cents, validated.status.value,
                     invoice_id)
                )
        except psycopg2.Error:
            logger.exception(f"Failed to update invoice {invoice_id}")
            return PersistenceFailure("Database Error: Failed to Update Invoice.")

        logger.info(f"Updated invoice {invoice_id}")
        self.view_cache.revalidate(INVOICES_PATH)
        return Ok(invoice_id)

    def delete(self, invoice_id: UUID) -> MutationResult:
        """
        Delete an invoice. Deleting an id that does not exist still succeeds.

        Returns:
            Ok with a confirmation message, or PersistenceFailure
        """
        try:
            self.postgres.execute(
                "DELETE FROM invoices WHERE id = %s",
                (invoice_id,)
            )
        except psycopg2.Error:
            logger.exception(f"Failed to delete invoice {invoice_id}")
            return PersistenceFailure("Database Error: Failed to Delete Invoice.")

        logger.info(f"Deleted invoice {invoice_id}")
        self.view_cache.revalidate(INVOICES_PATH)
        return Ok(invoice_id, message="Deleted Invoice.")

    def get_by_id(self, invoice_id: UUID) -> Invoice | None:
        """
        Get invoice by ID.

        Returns:
            Invoice if found, None otherwise.
        """
        row = self.postgres.execute_single(
            f"SELECT {_COLUMNS} FROM invoices WHERE id = %s",
            (invoice_id,)
        )

        if row is None:
            return None

        return Invoice.model_validate(row)

    def list_all(self, limit: int = 50) -> list[Invoice]:
        """
        List invoices, newest first.

        Args:
            limit: Maximum results
        """
        rows = self.postgres.execute(
            f"SELECT {_COLUMNS} FROM invoices ORDER BY date DESC, id LIMIT %s",
            (limit,)
        )

        return [Invoice.model_validate(row) for row in rows]
