# src/betlog/ingest/normalize.py
# -----------------------------------------------------------------------------
# Field normalization: RawRow text -> typed scalars.
#
# to_float(text)        : currency/odds text -> float, 0.0 on empty/garbage
# text_field(row, col)  : stripped text, "" when the column is absent
# is_win / is_loss      : case-insensitive status tests (Won|Win, Lost|Lose|Loss)
#
# Status and result labels are never rewritten here; case folding happens only
# at comparison sites so the source label survives into the records.
# -----------------------------------------------------------------------------
from __future__ import annotations

import math
import re
from collections.abc import Mapping

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_STRIP_CHARS_RE = re.compile(r"[\s,$£€]")

WIN_LABELS = frozenset({"won", "win"})
LOSS_LABELS = frozenset({"lost", "lose", "loss"})


def to_float(text: object) -> float:
    """
    Parse a numeric field; empty or unparseable values become 0.0.

    Accepts "$1,250.50", " 2.10 ", "-5", "(12.00)" (accounting negative).
    """
    if text is None:
        return 0.0
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        v = float(text)
        return v if math.isfinite(v) else 0.0
    s = _STRIP_CHARS_RE.sub("", str(text))
    negative = s.startswith("(") and s.endswith(")")
    if negative:
        s = s[1:-1]
    if not _NUMBER_RE.match(s):
        return 0.0
    v = float(s)
    if not math.isfinite(v):
        return 0.0
    return -v if negative else v


def text_field(row: Mapping[str, str], col: str) -> str:
    """Stripped text for `col`, or "" when absent."""
    v = row.get(col)
    return "" if v is None else str(v).strip()


def has_value(row: Mapping[str, str], col: str) -> bool:
    return bool(text_field(row, col))


def is_win(status: str) -> bool:
    return status.strip().lower() in WIN_LABELS


def is_loss(status: str) -> bool:
    return status.strip().lower() in LOSS_LABELS


def is_result_word(text: str) -> bool:
    """True for a settled leg result label (Win/Lose and their spellings)."""
    return is_win(text) or is_loss(text)
