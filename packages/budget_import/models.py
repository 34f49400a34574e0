"""Data models for transaction-file validation.

The transaction record is a transient view over one split data row; nothing in
this package persists it. The validation report is the only value handed back
to callers (CLI renderers, import endpoints).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# Required column names, in the order used for "Missing headers" messages.
REQUIRED_HEADERS: tuple[str, ...] = ("Date", "Description", "Amount", "Category", "Type")

# Number of positional fields a data row must carry.
EXPECTED_COLUMNS = len(REQUIRED_HEADERS)


class TransactionType(StrEnum):
    """Direction of a money movement (case-sensitive wire values)."""

    INCOME = "Income"
    EXPENSE = "Expense"


@dataclass(frozen=True, slots=True)
class TransactionRow:
    """One data row split into its positional fields.

    Fields missing from a short row are ``None``; extra trailing fields are
    kept only in :attr:`width`.
    """

    line: int
    date: str | None
    description: str | None
    amount: str | None
    category: str | None
    type: str | None
    width: int

    @classmethod
    def from_fields(cls, line: int, fields: Sequence[str]) -> TransactionRow:
        def at(pos: int) -> str | None:
            return fields[pos] if pos < len(fields) else None

        return cls(
            line=line,
            date=at(0),
            description=at(1),
            amount=at(2),
            category=at(3),
            type=at(4),
            width=len(fields),
        )


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Outcome of checking one candidate transaction file.

    Two shapes exist in practice:

    - whole-file failure: ``valid=False``, ``error`` set, ``total_rows`` is
      ``None`` and ``issues`` is empty (no row scan happened);
    - scanned file: ``error`` is ``None``, ``total_rows`` counts the data rows
      and ``issues`` lists every row-level problem in scan order.
    """

    valid: bool
    total_rows: int | None = None
    issues: tuple[str, ...] = ()
    error: str | None = None

    @classmethod
    def failure(cls, message: str) -> ValidationReport:
        return cls(valid=False, error=message)

    @classmethod
    def scanned(cls, total_rows: int, issues: Sequence[str]) -> ValidationReport:
        return cls(valid=not issues, total_rows=total_rows, issues=tuple(issues))

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON-friendly wire form (camelCase ``totalRows``)."""

        if self.error is not None:
            return {"valid": self.valid, "error": self.error}
        return {"valid": self.valid, "totalRows": self.total_rows, "issues": list(self.issues)}


__all__ = [
    "EXPECTED_COLUMNS",
    "REQUIRED_HEADERS",
    "TransactionRow",
    "TransactionType",
    "ValidationReport",
]
