"""Public interface for the ``budget_import`` package.

Re-exports the validator, the category taxonomy and the report/record models
as the stable import surface. There is no runtime logic here.
"""

from .batch import FileOutcome, render_outcome, validate_directory, validate_files
from .budget_inputs import BudgetAlertInput, BudgetCategoryInput
from .ingest import discover_files, read_transaction_file, validate_path
from .models import REQUIRED_HEADERS, TransactionRow, TransactionType, ValidationReport
from .taxonomy import Taxonomy, TaxonomyError, default_taxonomy, load_taxonomy
from .validator import validate

__all__ = [
    # Validation
    "validate",
    "validate_path",
    "validate_directory",
    "validate_files",
    "discover_files",
    "read_transaction_file",
    "render_outcome",
    # Taxonomy
    "Taxonomy",
    "TaxonomyError",
    "default_taxonomy",
    "load_taxonomy",
    # Models / types
    "FileOutcome",
    "REQUIRED_HEADERS",
    "TransactionRow",
    "TransactionType",
    "ValidationReport",
    "BudgetAlertInput",
    "BudgetCategoryInput",
]
