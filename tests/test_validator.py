from __future__ import annotations

import itertools

import pytest

from budget_import.models import REQUIRED_HEADERS, ValidationReport
from budget_import.taxonomy import Taxonomy
from budget_import.validator import (
    TOO_FEW_LINES,
    is_valid_amount,
    is_valid_date,
    validate,
)

HEADER = ",".join(REQUIRED_HEADERS)
GOOD_ROW = "2024-03-15,Coffee,4.50,Food & Dining,Expense"


def _content(*rows: str, header: str = HEADER) -> str:
    return "\n".join([header, *rows]) + "\n"


# ---- Whole-file errors -------------------------------------------------------


@pytest.mark.parametrize("content", ["", "   \n\n  ", HEADER, HEADER + "\n", "\n" + HEADER + "\n\n"])
def test_fewer_than_two_lines_is_whole_file_error(content: str):
    report = validate(content)
    assert report == ValidationReport(valid=False, error=TOO_FEW_LINES)
    assert report.issues == ()
    assert report.total_rows is None


def test_any_header_order_with_extra_columns_passes_header_check():
    for perm in itertools.permutations(REQUIRED_HEADERS):
        header = ",".join([*perm, "Notes"])
        report = validate(_content(GOOD_ROW, header=header))
        assert report.error is None, header


def test_header_fields_are_trimmed():
    header = " Date , Description,Amount ,Category,  Type "
    assert validate(_content(GOOD_ROW, header=header)).valid


@pytest.mark.parametrize("dropped", REQUIRED_HEADERS)
def test_missing_single_header_is_named(dropped: str):
    header = ",".join(h for h in REQUIRED_HEADERS if h != dropped)
    report = validate(_content(GOOD_ROW, header=header))
    assert report.valid is False
    assert report.error == f"Missing headers: {dropped}"
    assert report.issues == ()


def test_missing_headers_listed_in_canonical_order():
    report = validate(_content(GOOD_ROW, header="Type,Description,Foo"))
    assert report.error == "Missing headers: Date, Amount, Category"


def test_headers_are_case_sensitive():
    report = validate(_content(GOOD_ROW, header="date,Description,Amount,Category,Type"))
    assert report.error == "Missing headers: Date"


# ---- Row-level checks --------------------------------------------------------


def test_well_formed_row_has_no_issues():
    report = validate(_content(GOOD_ROW))
    assert report == ValidationReport(valid=True, total_rows=1, issues=())


@pytest.mark.parametrize(
    ("row", "expected"),
    [
        ("2024-3-15,Coffee,4.50,Food & Dining,Expense", "Row 2: Invalid date format"),
        ("2024-03-15,Coffee,abc,Food & Dining,Expense", "Row 2: Invalid amount"),
        (
            "2024-03-15,Coffee,4.50,Food & Dining,Refund",
            "Row 2: Type must be 'Income' or 'Expense'",
        ),
        ("2024-03-15,Coffee,4.50,Food & Dining,Expense,extra", "Row 2: Incorrect number of columns"),
    ],
)
def test_single_rule_violation_yields_exactly_one_issue(row: str, expected: str):
    report = validate(_content(row))
    assert report.valid is False
    assert report.total_rows == 1
    assert report.issues == (expected,)


def test_short_row_reports_columns_and_missing_positions():
    report = validate(_content("2024-03-15,Coffee,4.50"))
    assert report.issues == (
        "Row 2: Incorrect number of columns",
        "Row 2: Type must be 'Income' or 'Expense'",
    )


def test_single_field_row_fails_every_positional_check():
    report = validate(_content("hello"))
    assert report.issues == (
        "Row 2: Incorrect number of columns",
        "Row 2: Invalid date format",
        "Row 2: Invalid amount",
        "Row 2: Type must be 'Income' or 'Expense'",
    )


def test_checks_are_cumulative_within_a_row():
    report = validate(_content("15/03/2024,Coffee,,Food & Dining,expense"))
    assert report.issues == (
        "Row 2: Invalid date format",
        "Row 2: Invalid amount",
        "Row 2: Type must be 'Income' or 'Expense'",
    )


def test_quoted_comma_is_not_supported():
    report = validate(_content('2024-03-15,"Coffee, large",4.50,Food & Dining,Expense'))
    assert "Row 2: Incorrect number of columns" in report.issues


def test_type_is_trimmed_but_case_sensitive():
    assert validate(_content("2024-03-15,Pay,100,Salary,  Income ")).valid
    assert not validate(_content("2024-03-15,Pay,100,Salary,INCOME")).valid


def test_crlf_line_endings_are_tolerated():
    content = f"{HEADER}\r\n{GOOD_ROW}\r\n2024-03-16,Pay,100,Salary,Income\r\n"
    report = validate(content)
    assert report == ValidationReport(valid=True, total_rows=2, issues=())


def test_leading_byte_order_mark_is_trimmed():
    report = validate("\ufeff" + HEADER + "\n" + GOOD_ROW + "\n")
    assert report == ValidationReport(valid=True, total_rows=1, issues=())


def test_byte_order_mark_around_header_and_type_fields():
    content = "\ufeff \ufeffDate,Description,Amount,Category,Type\ufeff\n2024-03-15,Pay,100,Salary,Income\ufeff"
    assert validate(content).valid


def test_end_to_end_three_rows():
    content = _content(
        GOOD_ROW,
        "2024/03/16,Lunch,12.00,Food & Dining,Expense",
        "2024-03-17,Paycheck,2500,Salary,Deposit",
    )
    report = validate(content)
    assert report.total_rows == 3
    assert report.valid is False
    assert report.issues == (
        "Row 3: Invalid date format",
        "Row 4: Type must be 'Income' or 'Expense'",
    )


def test_blank_line_inside_data_counts_as_a_row():
    report = validate(_content(GOOD_ROW, "", GOOD_ROW))
    assert report.total_rows == 3
    assert report.issues[0] == "Row 3: Incorrect number of columns"


def test_validate_is_idempotent():
    content = _content(GOOD_ROW, "bad,row", "2024-13-45,x,1e3,Gas,Expense")
    assert validate(content) == validate(content)


# ---- Lenient vs strict parsing -------------------------------------------------


@pytest.mark.parametrize(
    "value", ["4.50", "12.5abc", "-3", "+7.", ".5", "  42", "1e5", "1e", "Infinity", "-Infinityx"]
)
def test_lenient_amount_accepts_numeric_prefix(value: str):
    assert is_valid_amount(value)


@pytest.mark.parametrize("value", ["", "abc", ".", "-", "e5", "$4.50", "NaN", None])
def test_lenient_amount_rejects_non_numeric(value: str | None):
    assert not is_valid_amount(value)


def test_lenient_date_is_pattern_only():
    assert is_valid_date("2024-02-30")
    assert is_valid_date("0000-99-99")
    assert not is_valid_date(" 2024-02-03")
    assert not is_valid_date("2024-02-03\n")
    assert not is_valid_date(None)


def test_strict_mode_rejects_impossible_dates_and_trailing_garbage():
    content = _content("2024-02-30,Coffee,4.50,Food & Dining,Expense", "2024-02-29,Coffee,12.5abc,Gas,Expense")
    assert validate(content).valid
    report = validate(content, strict=True)
    assert report.issues == ("Row 2: Invalid date format", "Row 3: Invalid amount")


@pytest.mark.parametrize(("value", "ok"), [("4.50", True), (" -12 ", True), ("NaN", False), ("Infinity", False), ("1,000", False)])
def test_strict_amount(value: str, ok: bool):
    assert is_valid_amount(value, strict=True) is ok


# ---- Category/type cross-check ---------------------------------------------


def test_category_check_is_off_by_default():
    assert validate(_content("2024-03-15,Pay,100,Salary,Expense")).valid


def test_category_check_flags_wrong_direction_and_unknown():
    content = _content(
        "2024-03-15,Pay,100,Salary,Expense",
        "2024-03-15,Pizza,20,Pizza,Expense",
        "2024-03-15,Refund,20, Other Income ,Income",
    )
    report = validate(content, check_categories=True)
    assert report.issues == (
        "Row 2: Category 'Salary' is not valid for Expense transactions",
        "Row 3: Unknown category 'Pizza'",
    )


def test_category_check_skips_rows_with_invalid_type():
    report = validate(_content("2024-03-15,Pay,100,Salary,Refund"), check_categories=True)
    assert report.issues == ("Row 2: Type must be 'Income' or 'Expense'",)


def test_category_check_uses_given_taxonomy_and_neutral_members():
    tax = Taxonomy(all=("Transfer", "Rent", "Salary"), expense=("Rent",), income=("Salary",))
    content = _content(
        "2024-03-15,Move,100,Transfer,Expense",
        "2024-03-15,Move,100,Transfer,Income",
        "2024-03-15,Coffee,4.50,Food & Dining,Expense",
    )
    report = validate(content, taxonomy=tax, check_categories=True)
    assert report.issues == ("Row 4: Unknown category 'Food & Dining'",)


def test_report_wire_form():
    ok = validate(_content(GOOD_ROW))
    assert ok.to_dict() == {"valid": True, "totalRows": 1, "issues": []}
    bad = validate(HEADER)
    assert bad.to_dict() == {"valid": False, "error": TOO_FEW_LINES}
