# src/betlog/common/schema.py
# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false
# -----------------------------------------------------------------------------
# Source column names + canonical dtype targets for exported frames.
# Used by:
#  - ingest (column lookups, alias renames),
#  - store.to_frames (best-effort coercion of the flat bet/leg tables).
# -----------------------------------------------------------------------------
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

import pandas as pd
from pandas import Float64Dtype, Int64Dtype, StringDtype

# Columns of the sportsbook export, by name
DATE_PLACED = "Date Placed"
STATUS = "Status"
LEAGUE = "League"
MATCH = "Match"
BET_TYPE = "Bet Type"
MARKET = "Market"
PRICE = "Price"
WAGER = "Wager"
WINNINGS = "Winnings"
PAYOUT = "Payout"
POTENTIAL_PAYOUT = "Potential Payout"
RESULT = "Result"
BET_SLIP_ID = "Bet Slip ID"

SOURCE_COLUMNS: tuple[str, ...] = (
    DATE_PLACED,
    STATUS,
    LEAGUE,
    MATCH,
    BET_TYPE,
    MARKET,
    PRICE,
    WAGER,
    WINNINGS,
    PAYOUT,
    POTENTIAL_PAYOUT,
    RESULT,
    BET_SLIP_ID,
)

# Columns that make a row carry leg information
LEG_COLUMNS: tuple[str, ...] = (MATCH, BET_TYPE, MARKET, PRICE, RESULT)

# Canonical dtype targets for store.to_frames()
BET_FRAME_DTYPES: dict[str, str] = {
    "bet_id": "string",
    "placed_at": "datetime64[ns]",
    "placed_at_text": "string",
    "sport": "string",
    "league": "string",
    "status": "string",
    "kind": "category",
    "wager": "Float64",
    "potential_payout": "Float64",
    "actual_payout": "Float64",
    "winnings": "Float64",
    "leg_count": "Int64",
}

LEG_FRAME_DTYPES: dict[str, str] = {
    "bet_id": "string",
    "leg_index": "Int64",
    "player": "string",
    "team": "string",
    "prop_type": "string",
    "market": "string",
    "odds": "Float64",
    "result": "string",
    "event_time": "datetime64[ns]",
    "sport": "string",
    "league": "string",
    "market_category": "category",
    "bet_category": "category",
}


def apply_rename_map(row: Mapping[str, str], rename_map: Mapping[str, str]) -> dict[str, str]:
    """
    Rename source aliases to canonical column names.

    A canonical column already present in the row is never overwritten by an alias.
    """
    if not rename_map:
        return dict(row)
    out: dict[str, str] = {}
    for k, v in row.items():
        target = rename_map.get(k, k)
        if target in out and k != target:
            continue
        out[target] = v
    return out


def _astype_any(s: pd.Series, dtype: Any) -> pd.Series:
    """Helper to keep type-checkers happy for dynamic astype fallbacks."""
    return cast(pd.Series, s.astype(dtype))


def coerce_frame(df: pd.DataFrame, dtypes: Mapping[str, str]) -> pd.DataFrame:
    """
    Best-effort coercion to canonical dtypes.

    - Datetime columns are parsed with errors='coerce' (unparsed timestamps → NaT).
    - Scalars use nullable pandas dtypes so missing values survive as <NA>.
    """
    out: pd.DataFrame = df.copy()
    for col, target in dtypes.items():
        if col not in out.columns:
            continue
        if target == "datetime64[ns]":
            out[col] = pd.to_datetime(out[col], errors="coerce")
        elif target == "string":
            out[col] = out[col].astype(StringDtype())
        elif target == "Float64":
            out[col] = pd.to_numeric(out[col], errors="coerce").astype(Float64Dtype())
        elif target == "Int64":
            out[col] = pd.to_numeric(out[col], errors="coerce").astype(Int64Dtype())
        else:
            out[col] = _astype_any(out[col], target)
    return out
