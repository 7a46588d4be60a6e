"""Naive delimited-text parser for marketplace payout exports.

Lines are split on CRLF or LF and cells on a single delimiter character.
There is no quoting support: a delimiter inside a quoted field shifts the
remaining columns of that row. Exports from the supported marketplaces do not
quote their cells, so rows are kept exactly as split.
"""

from __future__ import annotations

import re

from ..models import TabularDataset

PREVIEW_ROW_LIMIT = 5
"""Number of data rows kept by :func:`parse_csv` when parsing for display."""

_LINE_BREAK = re.compile(r"\r\n|\n")


def _split_line(line: str, delimiter: str) -> tuple[str, ...]:
    return tuple(cell.strip() for cell in line.split(delimiter))


def parse_csv(
    text: str,
    delimiter: str = ",",
    *,
    max_rows: int | None = PREVIEW_ROW_LIMIT,
) -> TabularDataset:
    """Split ``text`` into a header row and data rows.

    - Lines blank after trimming are discarded before anything else.
    - With no remaining lines the result has empty headers and rows; callers
      treat that as an invalid file.
    - The first remaining line is the header; every cell is trimmed.
    - ``max_rows`` bounds how many data lines are split (the first five by
      default, for previews). Pass ``None`` to parse every data line.
    """

    lines = [line for line in _LINE_BREAK.split(text) if line.strip()]
    if not lines:
        return TabularDataset(headers=(), rows=())

    headers = _split_line(lines[0], delimiter)
    body = lines[1:] if max_rows is None else lines[1 : 1 + max(max_rows, 0)]
    rows = tuple(_split_line(line, delimiter) for line in body)
    return TabularDataset(headers=headers, rows=rows)


def parse_csv_full(text: str, delimiter: str = ",") -> TabularDataset:
    """Parse every data line of ``text`` (no preview bound)."""

    return parse_csv(text, delimiter, max_rows=None)


__all__ = ["PREVIEW_ROW_LIMIT", "parse_csv", "parse_csv_full"]
