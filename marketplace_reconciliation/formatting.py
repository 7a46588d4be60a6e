"""Display helpers layered on top of the raw reconciled amounts.

Nothing here feeds back into computation: the report and totals keep their
unrounded floats and only the text shown to a person is shaped here.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import ReconciledRecord, TabularDataset
from .report import format_amount

CURRENCY_SYMBOL = "€"
_NBSP = "\u00a0"


def _group_thousands(digits: str) -> str:
    # es-ES leaves four-digit amounts ungrouped ("1234"), groups from five up.
    if len(digits) < 5:
        return digits
    parts: list[str] = []
    while len(digits) > 3:
        parts.append(digits[-3:])
        digits = digits[:-3]
    parts.append(digits)
    return ".".join(reversed(parts))


def format_currency(value: float) -> str:
    """Format ``value`` as Spanish euros, e.g. ``12.345,67 €``."""

    text = format_amount(value)
    if text in {"NaN", "Infinity", "-Infinity"}:
        return text
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    integer, _, fraction = text.partition(".")
    return f"{sign}{_group_thousands(integer)},{fraction}{_NBSP}{CURRENCY_SYMBOL}"


# Labels of the dashboard KPI cards, paired with the totals field they show.
KPI_FIELDS: tuple[tuple[str, str], ...] = (
    ("Total Facturado", "invoice_total"),
    ("Total Comisiones", "commission"),
    ("Total Envíos", "shipping_fee"),
    ("TOTAL A INGRESAR", "net_total"),
)


def summarize_totals(totals: ReconciledRecord) -> list[tuple[str, str]]:
    """Return ``(label, formatted amount)`` pairs for the KPI summary."""

    return [(label, format_currency(getattr(totals, field))) for label, field in KPI_FIELDS]


def render_preview(dataset: TabularDataset, *, sep: str = "\t") -> str:
    """Render the preview dataset as ``sep``-joined lines, header first."""

    lines: list[Sequence[str]] = [dataset.headers, *dataset.rows]
    return "\n".join(sep.join(cells) for cells in lines)


__all__ = [
    "CURRENCY_SYMBOL",
    "KPI_FIELDS",
    "format_currency",
    "render_preview",
    "summarize_totals",
]
