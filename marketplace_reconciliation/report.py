"""Serialize reconciled rows and the totals row into the downloadable CSV.

Column order and labels are fixed: accounting imports the file by position.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from .models import ReconciledRecord

REPORT_FILENAME = "conciliacion_pagos_marketplaces.csv"
REPORT_DELIMITER = ","

REPORT_HEADERS: tuple[str, ...] = (
    "Tipo de Transacción",
    "ID de Pedido",
    "Fecha de pago/reembolso",
    "Total",
    "Total Factura",
    "Comisión Marketplace",
    "Gastos de envio",
    "Paquete de devolución - Gastos de envío",
    "1% Retencion",
    "Importe Retenido",
    "Total Neto",
    "Plataforma de Venta",
)


def format_amount(value: float) -> str:
    """Render ``value`` with exactly two decimals.

    Ties round away from zero on the exact binary value of the float, so
    ``0.125`` becomes ``"0.13"`` and ``-0.125`` becomes ``"-0.13"``.
    """

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        # Normalize -0.0 so an exact zero never prints a sign.
        value = 0.0
    q = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{q:.2f}"


def escape_cell(value: str | int | float) -> str:
    """Quote a cell when it contains the delimiter, a double quote or a newline."""

    s = str(value)
    if REPORT_DELIMITER in s or '"' in s or "\n" in s:
        return '"' + s.replace('"', '""') + '"'
    return s


def _row_cells(record: ReconciledRecord) -> list[str]:
    return [
        escape_cell(record.transaction_type),
        escape_cell(record.order_id),
        escape_cell(record.payout_date),
        escape_cell(format_amount(record.total)),
        escape_cell(format_amount(record.invoice_total)),
        escape_cell(format_amount(record.commission)),
        escape_cell(format_amount(record.shipping_fee)),
        escape_cell(format_amount(record.return_shipping_fee)),
        escape_cell(int(record.retention_flag)),
        escape_cell(format_amount(record.retained_amount)),
        escape_cell(format_amount(record.net_total)),
        escape_cell(record.selling_platform),
    ]


def serialize_report(records: Iterable[ReconciledRecord], totals: ReconciledRecord) -> str:
    """Return the report text: header line, one line per record, then totals.

    Lines are joined with ``"\\n"``; there is no trailing newline.
    """

    lines = [REPORT_DELIMITER.join(REPORT_HEADERS)]
    lines.extend(REPORT_DELIMITER.join(_row_cells(r)) for r in records)
    lines.append(REPORT_DELIMITER.join(_row_cells(totals)))
    return "\n".join(lines)


__all__ = [
    "REPORT_FILENAME",
    "REPORT_HEADERS",
    "escape_cell",
    "format_amount",
    "serialize_report",
]
