"""Outcomes of invoice mutations.

Mutations never raise for expected failures. They return exactly one of:

- Ok: the row was written (or deleted); carries the invoice id
- ValidationFailure: form fields rejected, database untouched
- PersistenceFailure: the database statement failed

The HTTP layer decides what each outcome means for navigation.
"""

from dataclasses import dataclass, field
from typing import Any, Union
from uuid import UUID


@dataclass(frozen=True)
class Ok:
    """Mutation applied."""

    invoice_id: UUID
    message: str | None = None

    def to_state(self) -> dict[str, Any]:
        return {"message": self.message}


@dataclass(frozen=True)
class ValidationFailure:
    """Form fields failed validation."""

    errors: dict[str, list[str]] = field(default_factory=dict)
    message: str = ""

    def to_state(self) -> dict[str, Any]:
        return {"errors": self.errors, "message": self.message}


@dataclass(frozen=True)
class PersistenceFailure:
    """Database statement failed. The message is safe to show users."""

    message: str

    def to_state(self) -> dict[str, Any]:
        return {"message": self.message}


MutationResult = Union[Ok, ValidationFailure, PersistenceFailure]
