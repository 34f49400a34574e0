"""File discovery and reading for transaction-file validation.

The validator itself is a pure function over text; this module owns the I/O
around it. Read and decode failures are converted into a whole-file error
report so a batch run can report the file and move on.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .logging_setup import get_logger
from .models import ValidationReport
from .taxonomy import Taxonomy
from .validator import validate

logger = get_logger(__name__)

DEFAULT_SUFFIX = ".csv"
_BOM = "\ufeff"


def discover_files(directory: str | PathLike[str], *, suffix: str = DEFAULT_SUFFIX) -> list[Path]:
    """Return regular files directly under ``directory`` ending in ``suffix``.

    Sorted by file name, which is the order a batch run reports them in.
    Raises ``NotADirectoryError`` when ``directory`` is not a directory.
    """

    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    return sorted(
        (p for p in root.iterdir() if p.is_file() and p.name.endswith(suffix)),
        key=lambda p: p.name,
    )


def read_transaction_file(path: str | PathLike[str], *, encoding: str = "utf-8") -> str:
    """Read and decode one file, dropping a leading byte-order mark."""

    text = Path(path).read_text(encoding=encoding)
    return text.removeprefix(_BOM)


def validate_path(
    path: str | PathLike[str],
    *,
    encoding: str = "utf-8",
    taxonomy: Taxonomy | None = None,
    strict: bool = False,
    check_categories: bool = False,
) -> ValidationReport:
    """Read ``path`` and validate its content.

    ``OSError``, ``UnicodeDecodeError`` and ``LookupError`` (unknown codec)
    become a report with ``error`` set to the exception text; anything else
    propagates.
    """

    try:
        content = read_transaction_file(path, encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        logger.warning("failed to read %s: %s", path, exc)
        return ValidationReport.failure(str(exc))
    return validate(
        content,
        taxonomy=taxonomy,
        strict=strict,
        check_categories=check_categories,
    )


__all__ = ["DEFAULT_SUFFIX", "discover_files", "read_transaction_file", "validate_path"]
