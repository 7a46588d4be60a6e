"""Public API and orchestration for the ``marketplace_reconciliation`` package.

The pipeline is a pure function of the export text:

    text -> parse -> aggregate -> derive -> (reduce totals, serialize)

No function here performs I/O; callers hand in the file contents and decide
what to do with the result (print it, write the report, render a table).
"""

from __future__ import annotations

from .aggregation import aggregate
from .config import ReconcileSettings
from .derivation import derive_all
from .ingest.tabular import parse_csv, parse_csv_full
from .logging_setup import get_logger
from .models import ReconciledRecord, ReconciliationResult, TabularDataset
from .report import serialize_report
from .totals import reduce_totals

logger = get_logger(__name__)

INVALID_FILE_MESSAGE = "El archivo CSV parece estar vacío o tiene un formato incorrecto."


class InvalidFileError(ValueError):
    """The input text has no non-blank lines to read a header from."""

    def __init__(self, message: str = INVALID_FILE_MESSAGE) -> None:
        super().__init__(message)


def _resolve(settings: ReconcileSettings | None, delimiter: str | None) -> ReconcileSettings:
    base = settings if settings is not None else ReconcileSettings()
    if delimiter is None or delimiter == base.delimiter:
        return base
    # Re-validate so an explicit delimiter obeys the same rules as configured ones.
    return ReconcileSettings.model_validate({**base.model_dump(), "delimiter": delimiter})


def preview(
    text: str,
    *,
    delimiter: str | None = None,
    settings: ReconcileSettings | None = None,
) -> TabularDataset:
    """Parse the header and the first few data rows for display."""

    cfg = _resolve(settings, delimiter)
    return parse_csv(text, cfg.delimiter, max_rows=cfg.preview_rows)


def process_transactions(
    text: str,
    *,
    delimiter: str | None = None,
    settings: ReconcileSettings | None = None,
) -> list[ReconciledRecord]:
    """Aggregate and derive every transaction line of ``text``.

    Re-scans the whole text rather than reusing a preview. Returns ``[]``
    (after logging a warning) when required columns are missing.
    """

    cfg = _resolve(settings, delimiter)
    dataset = parse_csv_full(text, cfg.delimiter)
    groups = aggregate(dataset)
    return derive_all(
        groups,
        retention_rate=cfg.retention_rate,
        retention_marker=cfg.retention_marker,
    )


def reconcile(
    text: str,
    *,
    delimiter: str | None = None,
    settings: ReconcileSettings | None = None,
) -> ReconciliationResult:
    """Run the full pipeline over ``text``.

    Raises
    ------
    InvalidFileError
        When ``text`` has no non-blank lines.

    Missing required columns are not an error: the result then carries no
    records and a zero totals row.
    """

    cfg = _resolve(settings, delimiter)
    shown = parse_csv(text, cfg.delimiter, max_rows=cfg.preview_rows)
    if shown.is_empty:
        raise InvalidFileError()

    records = process_transactions(text, settings=cfg)
    totals = reduce_totals(records, label=cfg.totals_label)
    logger.info(
        "Reconciled %d group(s); net total %.2f",
        len(records),
        totals.net_total,
    )
    return ReconciliationResult(preview=shown, records=tuple(records), totals=totals)


def build_report(result: ReconciliationResult) -> str:
    """Serialize a pipeline result into the downloadable report text."""

    return serialize_report(result.records, result.totals)


__all__ = [
    "INVALID_FILE_MESSAGE",
    "InvalidFileError",
    "build_report",
    "preview",
    "process_transactions",
    "reconcile",
]
