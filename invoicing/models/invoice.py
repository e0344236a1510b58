"""Invoice domain models.

Amounts are stored in cents (integer). The form amount is a Decimal in
dollars and is rounded to the nearest cent, half away from zero, before
conversion: "19.99" -> 1999, "0.015" -> 2. Floats never touch money.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

CENT = Decimal("0.01")

# Largest amount whose cent value fits a PostgreSQL INTEGER column
MAX_AMOUNT = Decimal("21474836.47")


class InvoiceStatus(str, Enum):
    """Invoice payment status."""

    PENDING = "pending"
    PAID = "paid"


class InvoiceForm(BaseModel):
    """Invoice form fields, validated and normalized.

    Accepts the browser's field names (customerId, amount, status, receiptId).
    """

    customer_id: str = Field(..., alias="customerId", min_length=1)
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    status: InvoiceStatus
    receipt_id: str = Field("", alias="receiptId")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("receipt_id", mode="before")
    @classmethod
    def missing_receipt_is_blank(cls, value):
        return "" if value is None else value

    @field_validator("amount", mode="before")
    @classmethod
    def plain_digits_only(cls, value):
        # Decimal() would accept digit grouping like "1_000"
        if isinstance(value, str) and "_" in value:
            raise ValueError("Amount must not contain underscores")
        return value

    @field_validator("amount")
    @classmethod
    def round_to_cent(cls, value: Decimal) -> Decimal:
        rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
        if rounded <= 0:
            raise ValueError("Amount rounds to zero cents")
        return rounded

    @property
    def amount_cents(self) -> int:
        """Amount in integer cents."""
        return int(self.amount * 100)

    @property
    def has_receipt(self) -> bool:
        return self.receipt_id != ""


class Invoice(BaseModel):
    """Full invoice entity as stored."""

    id: UUID
    customer_id: str
    amount: int  # cents
    status: InvoiceStatus
    receipt_id: str | None = None
    date: date

    model_config = {"from_attributes": True}
