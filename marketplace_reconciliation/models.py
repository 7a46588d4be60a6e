"""Data models and type aliases for ``marketplace_reconciliation``.

The raw export is kept as strings (:class:`TabularDataset`); transaction rows
are never materialized as objects of their own but read through column
positions. Aggregated and totals rows share one shape,
:class:`ReconciledRecord`, so the report serializer treats them alike.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Raw tabular input
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TabularDataset:
    """Header row plus data rows, all cells as trimmed strings.

    Attributes
    ----------
    headers:
        Column names in file order. Uniqueness is not enforced.
    rows:
        Data rows in file order. A row may be shorter or longer than
        ``headers``; consumers decide what to do with such rows.
    """

    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when the source text had no non-blank lines."""

        return not self.headers


# ---------------------------------------------------------------------------
# Reconciled output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReconciledRecord:
    """One financial row of the reconciliation report.

    For aggregated rows ``key`` is ``"<order item id>|<transaction type>"``
    and the identifying fields come from the first transaction line seen for
    that key. The totals row uses the same shape with a sentinel ``order_id``
    and empty identifying fields.

    Amounts are unrounded floats; rounding happens only when the report is
    serialized or displayed.
    """

    key: str
    order_item_id: str
    transaction_type: str
    order_id: str
    payout_date: str
    selling_platform: str
    invoice_total: float = 0.0
    commission: float = 0.0
    shipping_fee: float = 0.0
    return_shipping_fee: float = 0.0
    total: float = 0.0
    retention_flag: int = 0
    retained_amount: float = 0.0
    net_total: float = 0.0


type ReconciledRecords = Sequence[ReconciledRecord]
"""Reconciled rows in aggregation order (first-seen key first)."""


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Everything a presentation layer needs after one pipeline run.

    ``preview`` holds only the bounded prefix of rows shown to the user;
    ``records`` and ``totals`` are computed from every row of the input.
    """

    preview: TabularDataset
    records: tuple[ReconciledRecord, ...]
    totals: ReconciledRecord

    @property
    def has_records(self) -> bool:
        return bool(self.records)


__all__ = [
    "ReconciledRecord",
    "ReconciledRecords",
    "ReconciliationResult",
    "TabularDataset",
]
