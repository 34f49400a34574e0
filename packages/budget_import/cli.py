"""CLI for the ``budget_import`` package.

Typer-based console interface with two commands:

- ``validate PATH...``: validate transaction files (directories are expanded
  to their ``--suffix`` files) and print one outcome per file.
- ``categories``: print the category taxonomy.

Environment variables may come from a local ``.env`` (loaded with
``python-dotenv`` without overriding the existing environment):
``BUDGET_IMPORT_LOG_LEVEL``, ``BUDGET_IMPORT_MAX_WORKERS`` and
``BUDGET_IMPORT_TAXONOMY_FILE``. Command-line options take precedence.
"""

from __future__ import annotations

import json
import os
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .batch import collect_files, render_outcome, validate_files
from .ingest import DEFAULT_SUFFIX
from .logging_setup import configure_logging, get_logger
from .taxonomy import Taxonomy, TaxonomyError, default_taxonomy, load_taxonomy

logger = get_logger(__name__)

# Exit codes
EXIT_INVALID = 1
EXIT_NO_FILES = 2


# ---- Small module-level helpers ---------------------------------------------


def _resolve_max_workers(requested: int | None, n_files: int) -> int:
    """Resolve the worker count for a batch run.

    Uses ``requested`` when given, else ``BUDGET_IMPORT_MAX_WORKERS``, else 1.
    Capped to ``n_files`` and to 32, with a minimum of 1.
    """

    workers = requested
    if workers is None:
        env_val = os.getenv("BUDGET_IMPORT_MAX_WORKERS")
        try:
            workers = int(env_val) if env_val else None
        except ValueError:
            logger.warning("ignoring non-integer BUDGET_IMPORT_MAX_WORKERS=%r", env_val)
            workers = None
    if workers is None or workers < 1:
        return 1
    return max(1, min(workers, n_files, 32))


def _load_taxonomy_option(taxonomy_file: Path | None) -> Taxonomy:
    """Return the taxonomy from ``--taxonomy-file``/env, or the shipped one."""

    if taxonomy_file is None:
        env_val = os.getenv("BUDGET_IMPORT_TAXONOMY_FILE")
        taxonomy_file = Path(env_val) if env_val else None
    if taxonomy_file is None:
        return default_taxonomy()
    try:
        return load_taxonomy(taxonomy_file)
    except (OSError, TaxonomyError) as e:
        typer.echo(f"Error: failed to load taxonomy from {taxonomy_file}: {e}", err=True)
        raise typer.Exit(EXIT_INVALID) from e


# ---- Typer-based console interface ------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Validate transaction CSV exports and inspect the category taxonomy.",
)


class CategoryKind(StrEnum):
    ALL = "all"
    EXPENSE = "expense"
    INCOME = "income"


def _taxonomy_file_option() -> OptionInfo:
    return typer.Option(
        "--taxonomy-file",
        help="JSON taxonomy override (falls back to BUDGET_IMPORT_TAXONOMY_FILE).",
        dir_okay=False,
    )


@app.command("validate")
def validate_cmd(
    paths: Annotated[list[Path], typer.Argument(help="Files or directories to validate.")],
    *,
    suffix: Annotated[
        str, typer.Option(help="File-name suffix used when expanding directories.")
    ] = DEFAULT_SUFFIX,
    workers: Annotated[
        int | None,
        typer.Option(help="Files validated concurrently (falls back to BUDGET_IMPORT_MAX_WORKERS)."),
    ] = None,
    strict: Annotated[
        bool, typer.Option(help="Require real calendar dates and fully numeric amounts.")
    ] = False,
    check_categories: Annotated[
        bool, typer.Option(help="Check each row's category against its type.")
    ] = False,
    taxonomy_file: Annotated[Path | None, _taxonomy_file_option()] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit a JSON array.")] = False,
) -> None:
    """Validate transaction files and print a per-file outcome."""

    try:
        files = collect_files(paths, suffix=suffix)
    except NotADirectoryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_NO_FILES) from e
    if not files:
        typer.echo("No files to validate.", err=True)
        raise typer.Exit(EXIT_NO_FILES)

    taxonomy = _load_taxonomy_option(taxonomy_file) if check_categories else None
    outcomes = validate_files(
        files,
        workers=_resolve_max_workers(workers, len(files)),
        taxonomy=taxonomy,
        strict=strict,
        check_categories=check_categories,
    )

    if as_json:
        payload = [{"file": o.path.name, **o.report.to_dict()} for o in outcomes]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        typer.echo("🔍 Validating transaction files...\n")
        for outcome in outcomes:
            for line in render_outcome(outcome):
                typer.echo(line)
            typer.echo("")
        typer.echo("✨ Validation complete!")

    if not all(o.report.valid for o in outcomes):
        raise typer.Exit(EXIT_INVALID)


@app.command("categories")
def categories_cmd(
    *,
    kind: Annotated[
        CategoryKind, typer.Option(help="Which collection to print.")
    ] = CategoryKind.ALL,
    taxonomy_file: Annotated[Path | None, _taxonomy_file_option()] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit a JSON array.")] = False,
) -> None:
    """Print category names in display order."""

    taxonomy = _load_taxonomy_option(taxonomy_file)
    names = {
        CategoryKind.ALL: taxonomy.all_categories,
        CategoryKind.EXPENSE: taxonomy.expense_categories,
        CategoryKind.INCOME: taxonomy.income_categories,
    }[kind]()
    if as_json:
        typer.echo(json.dumps(list(names), ensure_ascii=False))
        return
    for name in names:
        typer.echo(name)


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    app()
