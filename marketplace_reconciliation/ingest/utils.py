"""Ingest utilities shared by CLI commands.

The reconciliation core never touches the filesystem; this helper is the file
acquisition side that hands raw text to it.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path


def read_export_text(csv_path: str | PathLike[str]) -> str:
    """Read a payout export as UTF-8 text.

    A leading byte-order mark is dropped so the first header cell matches
    its column name. OS errors (missing file, permissions) and
    ``UnicodeDecodeError`` propagate to the caller.
    """

    return Path(csv_path).read_text(encoding="utf-8-sig")


__all__ = ["read_export_text"]
