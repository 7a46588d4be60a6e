"""Per-group derived fields: total, marketplace retention and net payout."""

from __future__ import annotations

from collections.abc import Iterable

from .aggregation import AggregatedGroup
from .models import ReconciledRecord

RETENTION_MARKER = "miravia"
RETENTION_RATE = 0.01


def is_retention_platform(selling_platform: str, marker: str = RETENTION_MARKER) -> bool:
    """True when the platform name contains ``marker`` (case-insensitive)."""

    return marker.strip().lower() in selling_platform.strip().lower()


def derive(
    group: AggregatedGroup,
    *,
    retention_rate: float = RETENTION_RATE,
    retention_marker: str = RETENTION_MARKER,
) -> ReconciledRecord:
    """Compute ``total``, retention and ``net_total`` for a finished group.

    ``total`` is invoice + commission + shipping. Retention applies to the
    whole ``total`` when the selling platform matches ``retention_marker``.
    Values are left unrounded.
    """

    total = group.invoice_total + group.commission + group.shipping_fee
    eligible = is_retention_platform(group.selling_platform, retention_marker)
    retained = total * retention_rate if eligible else 0.0

    return ReconciledRecord(
        key=group.key,
        order_item_id=group.order_item_id,
        transaction_type=group.transaction_type,
        order_id=group.order_id,
        payout_date=group.payout_date,
        selling_platform=group.selling_platform,
        invoice_total=group.invoice_total,
        commission=group.commission,
        shipping_fee=group.shipping_fee,
        return_shipping_fee=group.return_shipping_fee,
        total=total,
        retention_flag=1 if eligible else 0,
        retained_amount=retained,
        net_total=total - retained,
    )


def derive_all(
    groups: Iterable[AggregatedGroup],
    *,
    retention_rate: float = RETENTION_RATE,
    retention_marker: str = RETENTION_MARKER,
) -> list[ReconciledRecord]:
    return [
        derive(g, retention_rate=retention_rate, retention_marker=retention_marker)
        for g in groups
    ]


__all__ = ["RETENTION_MARKER", "RETENTION_RATE", "derive", "derive_all", "is_retention_platform"]
