# src/betlog/ingest/classify.py
# -----------------------------------------------------------------------------
# Row tagging + text heuristics used by the assembler.
#
# classify_row(row)        : RowKind tag computed once, before field extraction
# split_bet_type(text)     : "Player - Prop Type" -> (player, prop_type)
# team_from_match(text)    : "Team A vs Team B" -> "Team A"
# market_category(text)    : Over/Under | Yes/No | Anytime | Other
# bet_category(text)       : Rushing | Passing | Receiving | Touchdown | Defense | Other
#
# All helpers are pure so their edge cases can be enumerated in unit tests.
# -----------------------------------------------------------------------------
from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum

from betlog.common import schema as cols
from betlog.ingest.normalize import has_value, text_field
from betlog.ingest.timestamps import looks_like_timestamp

BET_TYPE_SEPARATOR = " - "
_MATCH_SPLIT_RE = re.compile(r"\s+(?:vs\.?|v\.?|@)\s+", re.IGNORECASE)

# Bet Type values that mark a parent row of a multi-leg bet
MULTIPLE_MARKERS = frozenset({"multiple", "multi", "parlay", "same game multi", "sgm"})


class RowKind(str, Enum):
    PARENT = "parent"
    PARENT_UNDATED = "parent_undated"
    LEG = "leg"
    UNKNOWN = "unknown"


def classify_row(row: Mapping[str, str]) -> RowKind:
    """
    Tag a RawRow.

    PARENT         : Date Placed has the timestamp shape
    PARENT_UNDATED : no timestamp shape, but Bet Slip ID and Wager are present
    LEG            : any leg column (Match/Bet Type/Market/Price/Result) present
    UNKNOWN        : nothing usable (blank line, footer)
    """
    if looks_like_timestamp(row.get(cols.DATE_PLACED)):
        return RowKind.PARENT
    if has_value(row, cols.BET_SLIP_ID) and has_value(row, cols.WAGER):
        return RowKind.PARENT_UNDATED
    if any(has_value(row, c) for c in cols.LEG_COLUMNS):
        return RowKind.LEG
    return RowKind.UNKNOWN


def split_bet_type(text: str) -> tuple[str, str]:
    """
    First " - " segment is the player, the remainder (re-joined) the prop type.

    "Josh Allen - Passing Yards"          -> ("Josh Allen", "Passing Yards")
    "A. Brown - Receiving - Alt Line"     -> ("A. Brown", "Receiving - Alt Line")
    "Moneyline"                           -> ("Moneyline", "")
    """
    t = (text or "").strip()
    if not t:
        return "", ""
    parts = [p.strip() for p in t.split(BET_TYPE_SEPARATOR)]
    return parts[0], BET_TYPE_SEPARATOR.join(p for p in parts[1:] if p)


def team_from_match(text: str) -> str:
    """First team of "X vs Y" (also "vs.", "v", "@"); whole text if no separator."""
    t = (text or "").strip()
    if not t:
        return ""
    return _MATCH_SPLIT_RE.split(t, maxsplit=1)[0].strip()


_MARKET_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Over/Under", re.compile(r"\b(over|under)\b", re.IGNORECASE)),
    ("Yes/No", re.compile(r"\b(yes|no)\b", re.IGNORECASE)),
    ("Anytime", re.compile(r"anytime", re.IGNORECASE)),
)

_BET_CATEGORY_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Rushing", re.compile(r"rush", re.IGNORECASE)),
    ("Passing", re.compile(r"pass", re.IGNORECASE)),
    ("Receiving", re.compile(r"receiv|reception", re.IGNORECASE)),
    ("Touchdown", re.compile(r"touchdown|\btds?\b", re.IGNORECASE)),
    ("Defense", re.compile(r"defen|sack|tackle|intercept", re.IGNORECASE)),
)


def _first_rule(text: str, rules: tuple[tuple[str, re.Pattern[str]], ...]) -> str:
    for label, rx in rules:
        if rx.search(text or ""):
            return label
    return "Other"


def market_category(text: str) -> str:
    return _first_rule(text, _MARKET_RULES)


def bet_category(text: str) -> str:
    return _first_rule(text, _BET_CATEGORY_RULES)


def is_multiple_marker(bet_type: str) -> bool:
    return bet_type.strip().lower() in MULTIPLE_MARKERS


def row_has_leg_data(row: Mapping[str, str]) -> bool:
    """A parent row that also describes its own (single) selection."""
    bet_type = text_field(row, cols.BET_TYPE)
    if bet_type and is_multiple_marker(bet_type):
        return False
    return bool(bet_type) or has_value(row, cols.MARKET)
