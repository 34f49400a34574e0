"""Structural and field-level validation of transaction files.

Input format
------------
Comma-separated text with a header row naming ``Date, Description, Amount,
Category, Type`` (any order, extra columns tolerated) and one record per
line. Rows are split on ``,`` verbatim: quoted fields with embedded commas are
NOT supported, so such a row shows up as having too many columns.

Default checks are deliberately lenient:

- dates are matched against ``YYYY-MM-DD`` only, so ``2024-02-30`` passes;
- amounts only need a leading numeric prefix, so ``12.5abc`` passes.

``strict=True`` adds a calendar check and requires the whole amount to be a
finite decimal. ``check_categories=True`` cross-checks each row's category
against the taxonomy subset for its type.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date
from decimal import Decimal, InvalidOperation

from .logging_setup import get_logger
from .models import (
    EXPECTED_COLUMNS,
    REQUIRED_HEADERS,
    TransactionRow,
    TransactionType,
    ValidationReport,
)
from .taxonomy import Taxonomy, default_taxonomy

logger = get_logger(__name__)

TOO_FEW_LINES = "File must have at least header and one data row"

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
# Leading float literal as consumed by a prefix parser: optional whitespace and
# sign, then Infinity, digits with optional fraction, or a bare fraction; the
# exponent is only taken when digits follow it.
_FLOAT_PREFIX_RE = re.compile(
    r"\s*[+-]?(?:Infinity|[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?|\.[0-9]+(?:[eE][+-]?[0-9]+)?)"
)
_TYPES = frozenset(t.value for t in TransactionType)
# Whitespace for trimming purposes includes the byte-order mark.
_EDGE_SPACE_RE = re.compile(r"\A[\s\ufeff]+|[\s\ufeff]+\Z")


def _trim(value: str) -> str:
    return _EDGE_SPACE_RE.sub("", value)


def parse_header(line: str) -> list[str]:
    return [_trim(h) for h in line.split(",")]


def missing_headers(header: Sequence[str]) -> list[str]:
    """Required headers absent from ``header``, in canonical order."""

    present = set(header)
    return [h for h in REQUIRED_HEADERS if h not in present]


def is_valid_date(value: str | None, *, strict: bool = False) -> bool:
    if value is None or not _DATE_RE.fullmatch(value):
        return False
    if not strict:
        return True
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_amount(value: str | None, *, strict: bool = False) -> bool:
    if value is None:
        return False
    if not strict:
        return _FLOAT_PREFIX_RE.match(value) is not None
    try:
        return Decimal(value.strip()).is_finite()
    except InvalidOperation:
        return False


def is_valid_type(value: str | None) -> bool:
    return value is not None and _trim(value) in _TYPES


def check_row(
    row: TransactionRow,
    *,
    strict: bool = False,
    taxonomy: Taxonomy | None = None,
) -> list[str]:
    """Return every issue for one data row; checks never short-circuit."""

    prefix = f"Row {row.line}"
    issues: list[str] = []
    if row.width != EXPECTED_COLUMNS:
        issues.append(f"{prefix}: Incorrect number of columns")
    if not is_valid_date(row.date, strict=strict):
        issues.append(f"{prefix}: Invalid date format")
    if not is_valid_amount(row.amount, strict=strict):
        issues.append(f"{prefix}: Invalid amount")
    if not is_valid_type(row.type):
        issues.append(f"{prefix}: Type must be 'Income' or 'Expense'")
    elif taxonomy is not None:
        tx_type = TransactionType(_trim(row.type))
        issues.extend(_check_category((row.category or "").strip(), tx_type, taxonomy, prefix))
    return issues


def _check_category(
    category: str, tx_type: TransactionType, taxonomy: Taxonomy, prefix: str
) -> list[str]:
    if category not in taxonomy:
        return [f"{prefix}: Unknown category '{category}'"]
    if not taxonomy.allows(category, tx_type):
        return [f"{prefix}: Category '{category}' is not valid for {tx_type} transactions"]
    return []


def validate(
    content: str,
    *,
    taxonomy: Taxonomy | None = None,
    strict: bool = False,
    check_categories: bool = False,
) -> ValidationReport:
    """Validate the full text of one transaction file.

    Whole-file problems (fewer than two lines, missing required headers)
    produce a report with ``error`` set and no row scan. Otherwise every data
    row is checked and each problem is recorded as ``"Row <n>: ..."`` where
    ``n`` is the data-row index plus 2.

    ``taxonomy`` is consulted only when ``check_categories`` is true; the
    shipped taxonomy is used when none is given.
    """

    lines = _trim(content).split("\n")
    if len(lines) < 2:
        return ValidationReport.failure(TOO_FEW_LINES)

    missing = missing_headers(parse_header(lines[0]))
    if missing:
        return ValidationReport.failure("Missing headers: " + ", ".join(missing))

    cross_check = None
    if check_categories:
        cross_check = taxonomy if taxonomy is not None else default_taxonomy()
    data_rows = lines[1:]
    issues: list[str] = []
    for index, raw in enumerate(data_rows):
        row = TransactionRow.from_fields(index + 2, raw.split(","))
        issues.extend(check_row(row, strict=strict, taxonomy=cross_check))

    logger.debug("validated %d rows, %d issues", len(data_rows), len(issues))
    return ValidationReport.scanned(len(data_rows), issues)


__all__ = [
    "TOO_FEW_LINES",
    "check_row",
    "is_valid_amount",
    "is_valid_date",
    "is_valid_type",
    "missing_headers",
    "parse_header",
    "validate",
]
