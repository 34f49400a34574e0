"""Transaction category taxonomy.

A :class:`Taxonomy` is an immutable registry of category names partitioned into
an expense-side and an income-side subset. It is built explicitly (usually via
:func:`default_taxonomy`) and handed to whatever needs it; there is no
module-level mutable state.

Invariants (checked on construction):

- ``expense_categories`` and ``income_categories`` never overlap;
- both subsets are contained in ``all_categories``.

``all_categories`` may hold members that belong to neither subset; such
neutral categories are accepted for either transaction type.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .models import TransactionType

DEFAULT_ALL_CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Groceries",
    "Gas",
    "Rent",
    "Insurance",
    "Salary",
    "Investments",
    "Other Income",
    "Other Expense",
)

DEFAULT_EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Groceries",
    "Gas",
    "Rent",
    "Insurance",
    "Other Expense",
)

DEFAULT_INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Investments",
    "Other Income",
)


class TaxonomyError(ValueError):
    """Raised when taxonomy data violates the subset/disjointness invariants."""


def _dedupe(names: Iterable[str]) -> tuple[str, ...]:
    # Preserve first occurrence order.
    return tuple(dict.fromkeys(names))


@dataclass(frozen=True, slots=True)
class Taxonomy:
    all: tuple[str, ...]
    expense: tuple[str, ...]
    income: tuple[str, ...]

    def __post_init__(self) -> None:
        # Accept any iterable at construction; store ordered, de-duplicated tuples.
        object.__setattr__(self, "all", _dedupe(self.all))
        object.__setattr__(self, "expense", _dedupe(self.expense))
        object.__setattr__(self, "income", _dedupe(self.income))

        income = set(self.income)
        overlap = [c for c in self.expense if c in income]
        if overlap:
            raise TaxonomyError(
                "Categories cannot be both income and expense: " + ", ".join(overlap)
            )
        known = set(self.all)
        unknown = [c for c in (*self.expense, *self.income) if c not in known]
        if unknown:
            raise TaxonomyError("Directional categories missing from all: " + ", ".join(unknown))

    # ---- Read-only collections --------------------------------------------

    def all_categories(self) -> tuple[str, ...]:
        return self.all

    def expense_categories(self) -> tuple[str, ...]:
        return self.expense

    def income_categories(self) -> tuple[str, ...]:
        return self.income

    def categories_for(self, tx_type: TransactionType) -> tuple[str, ...]:
        return self.income if tx_type is TransactionType.INCOME else self.expense

    # ---- Lookups ----------------------------------------------------------

    def __contains__(self, category: object) -> bool:
        return category in self.all

    def direction_of(self, category: str) -> TransactionType | None:
        """Return the subset ``category`` belongs to.

        ``None`` means the name is neutral (in ``all`` only) or unknown.
        """

        if category in self.expense:
            return TransactionType.EXPENSE
        if category in self.income:
            return TransactionType.INCOME
        return None

    def allows(self, category: str, tx_type: TransactionType) -> bool:
        """True when ``category`` may be used for a ``tx_type`` transaction."""

        if category not in self.all:
            return False
        direction = self.direction_of(category)
        return direction is None or direction is tx_type


def default_taxonomy() -> Taxonomy:
    """Return the shipped category release."""

    return Taxonomy(
        all=DEFAULT_ALL_CATEGORIES,
        expense=DEFAULT_EXPENSE_CATEGORIES,
        income=DEFAULT_INCOME_CATEGORIES,
    )


# ---------------------------------------------------------------------------
# JSON loading
# ---------------------------------------------------------------------------


class TaxonomyFile(BaseModel):
    """On-disk shape of a taxonomy override file."""

    model_config = ConfigDict(strict=True, extra="forbid", str_strip_whitespace=True)

    all: list[str]
    expense: list[str]
    income: list[str]


def load_taxonomy(path: str | PathLike[str]) -> Taxonomy:
    """Load a taxonomy from a JSON file with ``all``/``expense``/``income`` lists.

    Raises :class:`TaxonomyError` for malformed JSON, a wrong shape, or data
    that breaks the taxonomy invariants. ``OSError`` from reading propagates.
    """

    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise TaxonomyError(f"Invalid taxonomy JSON in {p}: {exc}") from exc
    try:
        data = TaxonomyFile.model_validate(raw)
    except ValidationError as exc:
        raise TaxonomyError(f"Invalid taxonomy file {p}: {exc}") from exc
    return Taxonomy(all=tuple(data.all), expense=tuple(data.expense), income=tuple(data.income))


__all__ = [
    "DEFAULT_ALL_CATEGORIES",
    "DEFAULT_EXPENSE_CATEGORIES",
    "DEFAULT_INCOME_CATEGORIES",
    "Taxonomy",
    "TaxonomyError",
    "TaxonomyFile",
    "default_taxonomy",
    "load_taxonomy",
]
