"""Public interface for the ``marketplace_reconciliation`` package.

Symbol re-exports only; the pipeline lives in :mod:`.api` and the stage
modules it composes.
"""

from .aggregation import AggregatedGroup, aggregate, parse_amount
from .api import (
    InvalidFileError,
    build_report,
    preview,
    process_transactions,
    reconcile,
)
from .config import ReconcileSettings, load_settings
from .derivation import derive, derive_all, is_retention_platform
from .formatting import format_currency, summarize_totals
from .ingest.tabular import parse_csv, parse_csv_full
from .models import ReconciledRecord, ReconciliationResult, TabularDataset
from .report import REPORT_FILENAME, REPORT_HEADERS, serialize_report
from .totals import TOTALS_LABEL, reduce_totals

__all__ = [
    # API
    "reconcile",
    "preview",
    "process_transactions",
    "build_report",
    "InvalidFileError",
    # Stages
    "parse_csv",
    "parse_csv_full",
    "aggregate",
    "parse_amount",
    "derive",
    "derive_all",
    "is_retention_platform",
    "reduce_totals",
    "serialize_report",
    "format_currency",
    "summarize_totals",
    # Models / settings
    "AggregatedGroup",
    "ReconciledRecord",
    "ReconciliationResult",
    "TabularDataset",
    "ReconcileSettings",
    "load_settings",
    "REPORT_FILENAME",
    "REPORT_HEADERS",
    "TOTALS_LABEL",
]
