"""Server-side validation of budget payloads that reference categories.

The dashboard persists budget categories and budget alerts on its own; before
it does, submitted category names are checked here against the expense subset
of the taxonomy. Pass the taxonomy through pydantic's validation context::

    BudgetCategoryInput.model_validate(payload, context={"taxonomy": tax})

Without a context the shipped taxonomy is used.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .models import TransactionType
from .taxonomy import Taxonomy, default_taxonomy


def _taxonomy_from(info: ValidationInfo) -> Taxonomy:
    tax = info.context.get("taxonomy") if info.context else None
    return tax if isinstance(tax, Taxonomy) else default_taxonomy()


def _require_expense_category(name: str, info: ValidationInfo) -> str:
    taxonomy = _taxonomy_from(info)
    if name not in taxonomy.categories_for(TransactionType.EXPENSE):
        raise ValueError(f"not an expense category: {name!r}")
    return name


class BudgetCategoryInput(BaseModel):
    """A budget line for one expense category."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    category_name: str
    budget_amount: float = Field(gt=0)
    spent_amount: float = Field(default=0.0, ge=0)
    period: Literal["weekly", "monthly", "yearly"] = "monthly"
    alert_threshold: int = Field(default=80, ge=1, le=100)
    is_active: bool = True

    @field_validator("category_name")
    @classmethod
    def _category_is_expense(cls, v: str, info: ValidationInfo) -> str:
        return _require_expense_category(v, info)


class BudgetAlertInput(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    alert_type: Literal[
        "threshold_reached", "over_budget", "goal_achieved", "deadline_approaching"
    ]
    message: str = Field(min_length=1)
    category_name: str | None = None
    is_read: bool = False

    @field_validator("category_name")
    @classmethod
    def _category_is_expense(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None:
            return None
        return _require_expense_category(v, info)


__all__ = ["BudgetAlertInput", "BudgetCategoryInput"]
