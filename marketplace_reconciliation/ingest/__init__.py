"""Input side of the pipeline: text acquisition and tabular parsing."""

from .tabular import PREVIEW_ROW_LIMIT, parse_csv, parse_csv_full
from .utils import read_export_text

__all__ = ["PREVIEW_ROW_LIMIT", "parse_csv", "parse_csv_full", "read_export_text"]
