import logging
import textwrap

import pytest

from marketplace_reconciliation import aggregate, parse_amount, parse_csv_full
from marketplace_reconciliation.aggregation import find_column, resolve_columns

HEADER = "Order Item ID,Transaction Type,Order ID,Payout / Refund Date,Selling platform,Amount,Fee Name"


def _dataset(body: str):
    return parse_csv_full(HEADER + "\n" + textwrap.dedent(body).strip())


def test_two_lines_same_key_collapse_into_one_group():
    ds = _dataset(
        """
        A1,Sale,O-1,2025-01-10,Miravia ES,100,Item Price Credit
        A1,Sale,O-1,2025-01-10,Miravia ES,-10,Commission
        """
    )

    groups = aggregate(ds)

    assert len(groups) == 1
    g = groups[0]
    assert g.key == "A1|Sale"
    assert g.invoice_total == 100
    assert g.commission == -10
    assert g.shipping_fee == 0
    assert g.return_shipping_fee == 0


@pytest.mark.parametrize(
    ("fee_name", "field"),
    [
        ("Item Price Credit", "invoice_total"),
        ("Reversal Item Price", "invoice_total"),
        ("Reversal Item Price Subsidy", "invoice_total"),
        ("Commission", "commission"),
        ("Reversal Commission", "commission"),
        ("Shipping Fee Paid by Seller", "shipping_fee"),
    ],
)
def test_fee_names_route_to_their_sum(fee_name: str, field: str):
    ds = _dataset(f"A1,Sale,O-1,d,p,7.5,{fee_name}")

    g = aggregate(ds)[0]

    sums = {
        "invoice_total": g.invoice_total,
        "commission": g.commission,
        "shipping_fee": g.shipping_fee,
    }
    assert sums.pop(field) == 7.5
    assert set(sums.values()) == {0.0}


def test_unknown_fee_name_contributes_nothing():
    ds = _dataset(
        """
        A1,Sale,O-1,d,p,100,Item Price Credit
        A1,Sale,O-1,d,p,50,Unknown Fee
        A1,Sale,O-1,d,p,9,commission
        """
    )

    g = aggregate(ds)[0]

    assert g.invoice_total == 100
    # Fee names match exactly; lower-case "commission" is not routed.
    assert g.commission == 0
    assert g.return_shipping_fee == 0


def test_identifying_fields_come_from_first_row_of_key():
    ds = _dataset(
        """
        A1,Sale,O-1,2025-01-10,Miravia ES,1,Commission
        A1,Sale,O-2,2025-02-10,Amazon,1,Commission
        """
    )

    g = aggregate(ds)[0]

    assert (g.order_id, g.payout_date, g.selling_platform) == ("O-1", "2025-01-10", "Miravia ES")
    assert g.commission == 2


def test_output_follows_first_seen_key_order():
    ds = _dataset(
        """
        Z9,Sale,O,d,p,1,Commission
        A1,Sale,O,d,p,1,Commission
        Z9,Refund,O,d,p,1,Commission
        A1,Sale,O,d,p,1,Commission
        """
    )

    assert [g.key for g in aggregate(ds)] == ["Z9|Sale", "A1|Sale", "Z9|Refund"]


def test_rows_shorter_than_header_are_skipped():
    ds = _dataset(
        """
        A1,Sale,O,d,p,100,Item Price Credit
        B2,Sale,O
        """
    )

    assert [g.key for g in aggregate(ds)] == ["A1|Sale"]


def test_longer_rows_are_kept():
    ds = _dataset("A1,Sale,O,d,p,100,Item Price Credit,extra")

    assert aggregate(ds)[0].invoice_total == 100


@pytest.mark.parametrize("missing", ["Order Item ID", "Transaction Type", "Amount", "Fee Name"])
def test_missing_required_column_yields_empty_result(
    missing: str, caplog: pytest.LogCaptureFixture
):
    header = ",".join(h for h in HEADER.split(",") if h != missing)
    ds = parse_csv_full(header + "\nA1,Sale,O,d,p,100")

    with caplog.at_level(logging.WARNING, logger="marketplace_reconciliation"):
        assert aggregate(ds) == []

    assert missing in caplog.text


def test_optional_columns_may_be_absent():
    ds = parse_csv_full("order item id,TRANSACTION TYPE, amount ,Fee Name\nA1,Sale,5,Commission")

    g = aggregate(ds)[0]

    assert (g.order_id, g.payout_date, g.selling_platform) == ("", "", "")
    assert g.commission == 5


def test_find_column_is_case_insensitive_first_match():
    headers = ("x", " AMOUNT ", "Amount")

    assert find_column(headers, "Amount") == 1
    assert find_column(headers, "Fee Name") == -1
    assert resolve_columns(headers).missing_required() == [
        "Order Item ID",
        "Transaction Type",
        "Fee Name",
    ]


def test_key_separator_collision_is_not_guarded():
    # "A|B" + "C" and "A" + "B|C" share the key "A|B|C".
    ds = _dataset(
        """
        A|B,C,O,d,p,1,Commission
        A,B|C,O,d,p,2,Commission
        """
    )

    groups = aggregate(ds)

    assert len(groups) == 1
    assert groups[0].commission == 3


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("100", 100.0),
        ("-10.5", -10.5),
        (" 3.25 ", 3.25),
        ("12.50 EUR", 12.5),
        (".5", 0.5),
        ("1e2", 100.0),
        ("", 0.0),
        ("abc", 0.0),
        ("-", 0.0),
        (None, 0.0),
    ],
)
def test_parse_amount_never_raises(raw, expected):
    assert parse_amount(raw) == expected
