# src/betlog/common/contracts.py
# -----------------------------------------------------------------------------
# Pydantic models describing the ingestion settings "contract".
# The YAML file (configs/ingest.yaml) is loaded with yaml.safe_load and then
# validated here, so bad values fail early with a readable message instead of
# surfacing mid-run.
# -----------------------------------------------------------------------------
from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_BATCH_SIZE: int = 1000
DEFAULT_YIELD_EVERY: int = 100


class IngestSettings(BaseModel):
    """
    Tunables for one ingestion run.

    batch_size   : rows per batch; progress is reported per batch fraction
    yield_every  : rows between cooperative yields inside a batch
    sheet        : worksheet name/index for spreadsheet sources
    rename_map   : source column alias -> canonical column name
    ledger_path  : optional CSV run ledger (best-effort append)
    verbose      : forward row diagnostics to the console log
    """

    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0)
    yield_every: int = Field(default=DEFAULT_YIELD_EVERY, gt=0)
    sheet: str | int = 0
    rename_map: dict[str, str] = Field(default_factory=dict)
    ledger_path: Path | None = None
    verbose: bool = False

    @field_validator("rename_map", mode="before")
    @classmethod
    def _strip_aliases(cls, v: object) -> dict[str, str]:
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("rename_map must be a mapping of alias -> column")
        return {str(k).strip(): str(val).strip() for k, val in v.items()}


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from `path` (empty docs return {})."""
    with Path(path).open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return cast(dict[str, Any], data)


def load_settings(path: Path | None = None) -> IngestSettings:
    """
    Build IngestSettings from a YAML file; `None` yields defaults.

    The file may either hold the settings at top level or under an `ingest:` key.
    """
    if path is None:
        return IngestSettings()
    raw = _load_yaml(Path(path))
    section = raw.get("ingest", raw)
    return IngestSettings.model_validate(section or {})
