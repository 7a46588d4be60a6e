"""Group payout transaction lines by order item and sum fee categories.

Each export line carries one amount and a ``Fee Name`` saying what the amount
is. Lines sharing ``(Order Item ID, Transaction Type)`` collapse into one
:class:`AggregatedGroup` whose running sums feed the derivation step.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .logging_setup import get_logger
from .models import TabularDataset

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Column resolution
# ---------------------------------------------------------------------------

COL_ORDER_ITEM_ID = "Order Item ID"
COL_TRANSACTION_TYPE = "Transaction Type"
COL_ORDER_ID = "Order ID"
COL_PAYOUT_DATE = "Payout / Refund Date"
COL_SELLING_PLATFORM = "Selling platform"
COL_AMOUNT = "Amount"
COL_FEE_NAME = "Fee Name"

KEY_SEPARATOR = "|"


def find_column(headers: Sequence[str], name: str) -> int:
    """Return the position of ``name`` in ``headers`` or ``-1``.

    Matching is case-insensitive on trimmed header text; the first match wins.
    """

    wanted = name.strip().lower()
    for pos, header in enumerate(headers):
        if header.strip().lower() == wanted:
            return pos
    return -1


@dataclass(frozen=True, slots=True)
class ColumnIndex:
    """Resolved column positions (``-1`` when a column is absent)."""

    order_item_id: int
    transaction_type: int
    order_id: int
    payout_date: int
    selling_platform: int
    amount: int
    fee_name: int

    def missing_required(self) -> list[str]:
        required = (
            (COL_ORDER_ITEM_ID, self.order_item_id),
            (COL_TRANSACTION_TYPE, self.transaction_type),
            (COL_AMOUNT, self.amount),
            (COL_FEE_NAME, self.fee_name),
        )
        return [name for name, pos in required if pos == -1]


def resolve_columns(headers: Sequence[str]) -> ColumnIndex:
    return ColumnIndex(
        order_item_id=find_column(headers, COL_ORDER_ITEM_ID),
        transaction_type=find_column(headers, COL_TRANSACTION_TYPE),
        order_id=find_column(headers, COL_ORDER_ID),
        payout_date=find_column(headers, COL_PAYOUT_DATE),
        selling_platform=find_column(headers, COL_SELLING_PLATFORM),
        amount=find_column(headers, COL_AMOUNT),
        fee_name=find_column(headers, COL_FEE_NAME),
    )


# ---------------------------------------------------------------------------
# Amount parsing and fee routing
# ---------------------------------------------------------------------------

# Leading numeric prefix, e.g. "-12.50" in "-12.50 EUR".
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(raw: str | None) -> float:
    """Parse the numeric prefix of ``raw``; anything unparsable is ``0.0``."""

    if raw is None:
        return 0.0
    match = _NUMERIC_PREFIX.match(raw.strip())
    if match is None:
        return 0.0
    return float(match.group(0))


INVOICE_TOTAL = "invoice_total"
COMMISSION = "commission"
SHIPPING_FEE = "shipping_fee"
RETURN_SHIPPING_FEE = "return_shipping_fee"

# Exact fee names (after trim) and the running sum they add to. No fee name
# routes to the return-shipping sum; it stays in the report schema at zero.
FEE_ROUTES: dict[str, str] = {
    "Item Price Credit": INVOICE_TOTAL,
    "Reversal Item Price": INVOICE_TOTAL,
    "Reversal Item Price Subsidy": INVOICE_TOTAL,
    "Commission": COMMISSION,
    "Reversal Commission": COMMISSION,
    "Shipping Fee Paid by Seller": SHIPPING_FEE,
}


@dataclass(slots=True)
class AggregatedGroup:
    """Running sums for one ``(order item id, transaction type)`` key."""

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

    def add(self, fee_name: str, amount: float) -> bool:
        """Add ``amount`` to the sum ``fee_name`` routes to.

        Returns ``False`` when the fee name is not routed anywhere.
        """

        target = FEE_ROUTES.get(fee_name)
        if target is None:
            return False
        setattr(self, target, getattr(self, target) + amount)
        return True


def group_key(order_item_id: str, transaction_type: str) -> str:
    return f"{order_item_id}{KEY_SEPARATOR}{transaction_type}"


def _cell(row: Sequence[str], pos: int) -> str:
    return row[pos] if 0 <= pos < len(row) else ""


# ---------------------------------------------------------------------------
# Aggregation pass
# ---------------------------------------------------------------------------


def aggregate(dataset: TabularDataset) -> list[AggregatedGroup]:
    """Group every row of ``dataset`` and sum the routed fee amounts.

    Behavior:
    - When ``Order Item ID``, ``Transaction Type``, ``Amount`` or ``Fee Name``
      cannot be resolved, a warning is logged and ``[]`` is returned.
    - Rows with fewer cells than the header are skipped.
    - The first row seen for a key provides its order id, payout date and
      selling platform.
    - Output order is the order in which keys were first seen.

    ``dataset`` must hold the full row set, not the preview prefix.
    """

    headers = dataset.headers
    cols = resolve_columns(headers)
    missing = cols.missing_required()
    if missing:
        logger.warning("Missing required columns in CSV: %s", ", ".join(missing))
        return []

    groups: dict[str, AggregatedGroup] = {}
    skipped = 0
    unrouted = 0

    for row in dataset.rows:
        if len(row) < len(headers):
            skipped += 1
            continue

        order_item_id = _cell(row, cols.order_item_id)
        transaction_type = _cell(row, cols.transaction_type)
        key = group_key(order_item_id, transaction_type)

        group = groups.get(key)
        if group is None:
            group = AggregatedGroup(
                key=key,
                order_item_id=order_item_id,
                transaction_type=transaction_type,
                order_id=_cell(row, cols.order_id),
                payout_date=_cell(row, cols.payout_date),
                selling_platform=_cell(row, cols.selling_platform),
            )
            groups[key] = group

        amount = parse_amount(_cell(row, cols.amount))
        fee_name = _cell(row, cols.fee_name).strip()
        if not group.add(fee_name, amount):
            unrouted += 1

    if skipped:
        logger.debug("Skipped %d malformed row(s) with fewer cells than headers", skipped)
    if unrouted:
        logger.debug("Ignored %d line(s) with unrouted fee names", unrouted)

    return list(groups.values())


__all__ = [
    "COL_AMOUNT",
    "COL_FEE_NAME",
    "COL_ORDER_ID",
    "COL_ORDER_ITEM_ID",
    "COL_PAYOUT_DATE",
    "COL_SELLING_PLATFORM",
    "COL_TRANSACTION_TYPE",
    "FEE_ROUTES",
    "AggregatedGroup",
    "ColumnIndex",
    "aggregate",
    "find_column",
    "group_key",
    "parse_amount",
    "resolve_columns",
]
