import pytest

from marketplace_reconciliation import (
    AggregatedGroup,
    ReconciledRecord,
    derive,
    derive_all,
    is_retention_platform,
    reduce_totals,
)
from marketplace_reconciliation.totals import TOTALS_LABEL, empty_totals


def _group(platform: str, *, invoice=0.0, commission=0.0, shipping=0.0, key="A1|Sale"):
    order_item_id, _, transaction_type = key.partition("|")
    return AggregatedGroup(
        key=key,
        order_item_id=order_item_id,
        transaction_type=transaction_type,
        order_id="O-1",
        payout_date="2025-01-10",
        selling_platform=platform,
        invoice_total=invoice,
        commission=commission,
        shipping_fee=shipping,
    )


def test_total_is_invoice_plus_commission_plus_shipping():
    rec = derive(_group("Amazon", invoice=100, commission=-10, shipping=-4.5))

    assert rec.total == pytest.approx(85.5)


def test_miravia_platform_retains_one_percent_of_total():
    rec = derive(_group("Miravia ES", invoice=100, commission=-10))

    assert rec.retention_flag == 1
    assert rec.retained_amount == rec.total * 0.01
    assert rec.net_total == rec.total - rec.retained_amount


def test_other_platform_has_no_retention():
    rec = derive(_group("Amazon", invoice=100, commission=-10))

    assert rec.retention_flag == 0
    assert rec.retained_amount == 0
    assert rec.net_total == rec.total == 90


@pytest.mark.parametrize(
    ("platform", "eligible"),
    [
        ("Miravia ES", True),
        ("  MIRAVIA  ", True),
        ("shop.miravia.es", True),
        ("Amazon", False),
        ("", False),
        ("Mira via", False),
    ],
)
def test_retention_platform_is_a_case_insensitive_substring_match(platform, eligible):
    assert is_retention_platform(platform) is eligible


def test_derived_values_are_not_rounded():
    rec = derive(_group("Miravia", invoice=10.005))

    assert rec.retained_amount == 10.005 * 0.01


def test_retention_settings_are_honored():
    rec = derive(_group("Shopee MY", invoice=200), retention_rate=0.02, retention_marker="shopee")

    assert rec.retention_flag == 1
    assert rec.retained_amount == pytest.approx(4.0)


def test_derive_all_preserves_order():
    groups = [_group("x", key="B|Sale"), _group("x", key="A|Sale")]

    assert [r.key for r in derive_all(groups)] == ["B|Sale", "A|Sale"]


def test_reduce_totals_sums_every_amount_field():
    records = [
        derive(_group("Miravia ES", invoice=100, commission=-10, shipping=-5, key="A|Sale")),
        derive(_group("Amazon", invoice=50, commission=-5, key="B|Sale")),
    ]

    totals = reduce_totals(records)

    assert totals.invoice_total == 150
    assert totals.commission == -15
    assert totals.shipping_fee == -5
    assert totals.return_shipping_fee == 0
    assert totals.total == sum(r.total for r in records)
    assert totals.retained_amount == pytest.approx(0.85)
    assert totals.net_total == pytest.approx(129.15)
    assert totals.retention_flag == 0
    assert totals.order_id == TOTALS_LABEL
    assert (totals.order_item_id, totals.transaction_type, totals.payout_date) == ("", "", "")
    assert totals.selling_platform == ""


def test_reduce_totals_of_nothing_is_the_zero_record():
    totals = reduce_totals([])

    assert totals == empty_totals()
    assert totals.order_id == "TOTAL BANCO"
    for field in (
        "invoice_total",
        "commission",
        "shipping_fee",
        "return_shipping_fee",
        "total",
        "retained_amount",
        "net_total",
        "retention_flag",
    ):
        assert getattr(totals, field) == 0


def test_reduce_totals_custom_label():
    assert reduce_totals([], label="TOTAL").order_id == "TOTAL"


def test_reconciled_records_are_immutable():
    rec = derive(_group("Amazon", invoice=1))

    with pytest.raises(AttributeError):
        rec.total = 2  # type: ignore[misc]
    assert isinstance(rec, ReconciledRecord)
