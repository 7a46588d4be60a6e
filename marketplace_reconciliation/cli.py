# ruff: noqa: I001
"""CLI for the ``marketplace_reconciliation`` package.

Command handlers (``cmd_reconcile``, ``cmd_preview``) are plain functions that
return an exit code, so they can be called without Typer. The Typer app wraps
them, loads a local ``.env`` through ``python-dotenv`` and configures logging
once. File reading and writing happen here; the pipeline in
:mod:`marketplace_reconciliation.api` only sees text.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import OptionInfo

from .api import InvalidFileError, build_report, preview, reconcile
from .config import ReconcileSettings, load_settings
from .formatting import render_preview, summarize_totals
from .ingest.utils import read_export_text
from .logging_setup import configure_logging, get_logger
from .report import REPORT_FILENAME

logger = get_logger(__name__)


def _read_input(csv_path: str) -> str | None:
    """Read ``csv_path`` or print an error and return ``None``."""

    try:
        return read_export_text(csv_path)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
    except PermissionError:
        print(f"Error: Permission denied: {csv_path}", file=sys.stderr)
    except IsADirectoryError:
        print(f"Error: Not a file: {csv_path}", file=sys.stderr)
    except UnicodeDecodeError as e:
        print(f"Error: File is not valid UTF-8 text: {csv_path} ({e.reason})", file=sys.stderr)
    return None


def _load_settings_or_report() -> ReconcileSettings | None:
    try:
        return load_settings()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return None


def cmd_reconcile(
    csv_path: str,
    *,
    output_path: str | None = None,
    delimiter: str | None = None,
) -> int:
    """Reconcile a payout export and write the report CSV.

    Behavior
    --------
    - Reads ``csv_path`` as UTF-8 text.
    - Runs :func:`marketplace_reconciliation.api.reconcile` over it.
    - When rows were reconciled, writes the report to ``output_path``
      (default ``conciliacion_pagos_marketplaces.csv`` in the current
      directory) and prints the KPI totals.
    - When nothing was reconciled (missing required columns, or only
      malformed rows), prints a warning and writes no file.

    Errors are written to stderr with a non-zero return. Returns ``0`` on
    success, including the nothing-to-report case.
    """

    settings = _load_settings_or_report()
    if settings is None:
        return 1

    text = _read_input(csv_path)
    if text is None:
        return 1

    try:
        result = reconcile(text, delimiter=delimiter, settings=settings)
    except InvalidFileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: invalid option: {e}", file=sys.stderr)
        return 1

    if not result.has_records:
        print(
            "Warning: no rows could be reconciled; check that the file has the "
            "'Order Item ID', 'Transaction Type', 'Amount' and 'Fee Name' columns.",
            file=sys.stderr,
        )
        return 0

    target = Path(output_path) if output_path else Path.cwd() / REPORT_FILENAME
    try:
        target.write_text(build_report(result), encoding="utf-8")
    except OSError as e:
        print(f"Error: could not write report to {target}: {e}", file=sys.stderr)
        return 1

    for label, amount in summarize_totals(result.totals):
        print(f"{label}\t{amount}")
    print(f"Wrote {len(result.records)} row(s) + totals to {target}")
    logger.info("Report written to %s", target)
    return 0


def cmd_preview(csv_path: str, *, delimiter: str | None = None) -> int:
    """Print the header and the first data rows of ``csv_path``."""

    settings = _load_settings_or_report()
    if settings is None:
        return 1

    text = _read_input(csv_path)
    if text is None:
        return 1

    try:
        shown = preview(text, delimiter=delimiter, settings=settings)
    except ValidationError as e:
        print(f"Error: invalid option: {e}", file=sys.stderr)
        return 1
    if shown.is_empty:
        print(f"Error: {InvalidFileError()}", file=sys.stderr)
        return 1

    print(render_preview(shown))
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Reconcile marketplace payout exports into an accounting report. "
        "Loads MARKETPLACE_RECON_* settings from a local .env before running."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a marketplace payout transactions CSV",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)

DELIMITER_OPTION: OptionInfo = typer.Option(
    ...,  # default comes from the parameter
    "--delimiter",
    help="Single-character column delimiter (defaults to MARKETPLACE_RECON_DELIMITER or ',').",
)


@app.command("reconcile")
def reconcile_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    delimiter: Annotated[str | None, DELIMITER_OPTION] = None,
    *,
    output: Path | None = typer.Option(
        None,
        "--output",
        help=f"Where to write the report (default: ./{REPORT_FILENAME}).",
        dir_okay=False,
    ),
) -> None:
    """Group transaction lines, compute totals and write the report CSV."""

    code = cmd_reconcile(
        str(csv_path),
        output_path=str(output) if output is not None else None,
        delimiter=delimiter,
    )
    raise typer.Exit(code)


@app.command("preview")
def preview_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    delimiter: Annotated[str | None, DELIMITER_OPTION] = None,
) -> None:
    """Show the header and first rows of an export."""

    raise typer.Exit(cmd_preview(str(csv_path), delimiter=delimiter))


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to MARKETPLACE_RECON_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Root command: load ``.env`` and configure logging for subcommands."""

    # Keep already-set environment variables.
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


def main() -> None:
    """Console entrypoint for ``reconcile-payouts``."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
