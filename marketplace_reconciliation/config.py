"""Runtime settings for the reconciliation pipeline.

Defaults reproduce the marketplace rules the report was built for (comma
delimiter, five preview rows, 1% retention on Miravia sales, ``TOTAL BANCO``
totals label). Each value can be overridden through a
``MARKETPLACE_RECON_*`` environment variable; the CLI loads a local ``.env``
first via ``python-dotenv``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, field_validator

ENV_PREFIX = "MARKETPLACE_RECON_"


class ReconcileSettings(BaseModel):
    """Validated pipeline settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    delimiter: str = ","
    preview_rows: int = 5
    retention_marker: str = "miravia"
    retention_rate: float = 0.01
    totals_label: str = "TOTAL BANCO"

    @field_validator("delimiter")
    @classmethod
    def _single_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("delimiter must be exactly one character")
        return v

    @field_validator("preview_rows")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("preview_rows must be >= 0")
        return v

    @field_validator("retention_marker")
    @classmethod
    def _normalize_marker(cls, v: str) -> str:
        marker = v.strip().lower()
        if not marker:
            raise ValueError("retention_marker must be non-empty")
        return marker

    @field_validator("retention_rate")
    @classmethod
    def _rate_in_unit_interval(cls, v: float) -> float:
        if 0.0 <= v <= 1.0:
            return v
        raise ValueError("retention_rate must be within [0,1]")


def load_settings(env: Mapping[str, str] | None = None) -> ReconcileSettings:
    """Build settings from ``MARKETPLACE_RECON_*`` variables.

    ``env`` defaults to ``os.environ``. Unset or empty variables keep their
    defaults; invalid values raise ``pydantic.ValidationError``.
    """

    source = os.environ if env is None else env
    values: dict[str, str] = {}
    for field in ReconcileSettings.model_fields:
        raw = source.get(ENV_PREFIX + field.upper())
        # The delimiter may legitimately be whitespace (e.g. a tab).
        if not raw or (field != "delimiter" and not raw.strip()):
            continue
        values[field] = raw
    return ReconcileSettings.model_validate(values)


__all__ = ["ENV_PREFIX", "ReconcileSettings", "load_settings"]
