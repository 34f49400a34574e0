"""Batch validation over many transaction files.

Each file is validated independently; one file's failure is recorded in its
own report and never stops the run. Results always come back in discovery
order, whether files are processed sequentially or on a thread pool.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from functools import partial
from os import PathLike
from pathlib import Path
from typing import NamedTuple

from .ingest import DEFAULT_SUFFIX, discover_files, validate_path
from .logging_setup import get_logger
from .models import ValidationReport
from .pmap import p_map
from .taxonomy import Taxonomy

logger = get_logger(__name__)


class FileOutcome(NamedTuple):
    """A validated file paired with its report."""

    path: Path
    report: ValidationReport


def collect_files(
    paths: Iterable[str | PathLike[str]], *, suffix: str = DEFAULT_SUFFIX
) -> list[Path]:
    """Expand directories via :func:`discover_files`; keep plain paths as given.

    Paths that are not directories are passed through even when they do not
    exist, so the read failure shows up in that file's report.
    """

    files: list[Path] = []
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            files.extend(discover_files(p, suffix=suffix))
        else:
            files.append(p)
    return files


def validate_files(
    files: Sequence[Path],
    *,
    workers: int = 1,
    encoding: str = "utf-8",
    taxonomy: Taxonomy | None = None,
    strict: bool = False,
    check_categories: bool = False,
) -> list[FileOutcome]:
    """Validate ``files`` with up to ``workers`` concurrent reads."""

    check = partial(
        validate_path,
        encoding=encoding,
        taxonomy=taxonomy,
        strict=strict,
        check_categories=check_categories,
    )

    def _one(path: Path) -> FileOutcome:
        return FileOutcome(path, check(path))

    t0 = time.perf_counter()
    outcomes = p_map(files, _one, concurrency=max(1, min(workers, len(files) or 1)))
    invalid = sum(1 for o in outcomes if not o.report.valid)
    logger.info(
        "validated %d files (%d invalid) in %.2fs",
        len(outcomes),
        invalid,
        time.perf_counter() - t0,
    )
    return outcomes


def validate_directory(
    directory: str | PathLike[str],
    *,
    suffix: str = DEFAULT_SUFFIX,
    workers: int = 1,
    encoding: str = "utf-8",
    taxonomy: Taxonomy | None = None,
    strict: bool = False,
    check_categories: bool = False,
) -> list[FileOutcome]:
    """Validate every ``suffix`` file directly under ``directory``."""

    return validate_files(
        discover_files(directory, suffix=suffix),
        workers=workers,
        encoding=encoding,
        taxonomy=taxonomy,
        strict=strict,
        check_categories=check_categories,
    )


def render_outcome(outcome: FileOutcome) -> list[str]:
    """Human-readable lines for one file: name, verdict, then the details."""

    report = outcome.report
    lines = [f"📄 {outcome.path.name}:"]
    if report.valid:
        lines.append(f"   ✅ Valid ({report.total_rows} transactions)")
        return lines
    lines.append("   ❌ Invalid:")
    if report.error:
        lines.append(f"      {report.error}")
    lines.extend(f"      {issue}" for issue in report.issues)
    return lines


__all__ = [
    "FileOutcome",
    "collect_files",
    "render_outcome",
    "validate_directory",
    "validate_files",
]
