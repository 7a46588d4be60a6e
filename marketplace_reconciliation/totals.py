"""Fold reconciled rows into the single grand-total row of the report."""

from __future__ import annotations

from collections.abc import Iterable

from .models import ReconciledRecord

TOTALS_LABEL = "TOTAL BANCO"
TOTALS_KEY = "TOTALS"


def empty_totals(label: str = TOTALS_LABEL) -> ReconciledRecord:
    """The zero-valued totals row (what reducing no records yields)."""

    return ReconciledRecord(
        key=TOTALS_KEY,
        order_item_id="",
        transaction_type="",
        order_id=label,
        payout_date="",
        selling_platform="",
    )


def reduce_totals(
    records: Iterable[ReconciledRecord], *, label: str = TOTALS_LABEL
) -> ReconciledRecord:
    """Sum every amount field across ``records``.

    The retention flag is categorical per row, so the totals row keeps it at 0.
    """

    invoice_total = commission = shipping_fee = return_shipping_fee = 0.0
    total = retained_amount = net_total = 0.0
    for r in records:
        invoice_total += r.invoice_total
        commission += r.commission
        shipping_fee += r.shipping_fee
        return_shipping_fee += r.return_shipping_fee
        total += r.total
        retained_amount += r.retained_amount
        net_total += r.net_total

    return ReconciledRecord(
        key=TOTALS_KEY,
        order_item_id="",
        transaction_type="",
        order_id=label,
        payout_date="",
        selling_platform="",
        invoice_total=invoice_total,
        commission=commission,
        shipping_fee=shipping_fee,
        return_shipping_fee=return_shipping_fee,
        total=total,
        retention_flag=0,
        retained_amount=retained_amount,
        net_total=net_total,
    )


__all__ = ["TOTALS_KEY", "TOTALS_LABEL", "empty_totals", "reduce_totals"]
