# src/betlog/stats/engine.py
# -----------------------------------------------------------------------------
# Read-only aggregate views over a finalized BettingStore.
#
# quick_stats(store)            : headline numbers (QuickStats)
# roi(store)                    : (returned - wagered) / wagered * 100
# average_odds(store)           : mean decimal odds over all legs
# most_frequent(store, index)   : index key with the most bets
# breakdown(store, dimension)   : per-key count / wagered / won / P&L / win rate
# streaks(store)                : longest win/loss runs and the current run
#
# Definitions
# -----------
# - A bet is a win/loss by case-insensitive status match (Won|Win, Lost|Lose).
# - returned(bet) = actual payout when recorded, else potential payout for a
#   win, else 0. total_won sums returned() over winning bets.
# - Empty stores and zero stakes degrade to 0 instead of dividing by zero.
# -----------------------------------------------------------------------------
from __future__ import annotations

import math
from collections.abc import Hashable, Iterable
from dataclasses import dataclass

import numpy as np
import pandas as pd

from betlog.common.models import Bet
from betlog.ingest.normalize import is_loss, is_win
from betlog.store.indexer import ODDS_BUCKETS, BettingStore

BREAKDOWN_COLUMNS = ["key", "bets", "wagered", "won", "profit_loss", "win_rate"]

# breakdown dimension -> store index
DIMENSIONS: dict[str, str] = {
    "month": "month",
    "year": "year",
    "date": "date",
    "sport": "sport",
    "team": "team",
    "player": "player",
    "prop_type": "prop_type",
    "odds": "odds",
}
_CALENDAR_DIMENSIONS = {"month", "year", "date"}


@dataclass(frozen=True)
class QuickStats:
    total_bets: int
    total_wagered: float
    total_won: float
    profit_loss: float
    win_rate: float
    roi: float
    most_bet_sport: str
    most_bet_player: str
    average_odds: float


@dataclass(frozen=True)
class Streaks:
    longest_win: int
    longest_loss: int
    current_kind: str  # "win" | "loss" | "" when no settled bets
    current_length: int


def returned(bet: Bet) -> float:
    if bet.actual_payout > 0:
        return bet.actual_payout
    if is_win(bet.status):
        return bet.potential_payout
    return 0.0


def _pct(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole else 0.0


def win_rate(bets: Iterable[Bet]) -> float:
    items = list(bets)
    return _pct(sum(1 for b in items if is_win(b.status)), len(items))


def roi(store: BettingStore) -> float:
    wagered = store.metadata().total_wagered
    if wagered == 0:
        return 0.0
    total_returned = math.fsum(returned(b) for b in store.bets())
    return (total_returned - wagered) / wagered * 100.0


def average_odds(store: BettingStore) -> float:
    odds = [leg.odds for bet in store.bets() for leg in bet.legs]
    return float(np.mean(odds)) if odds else 0.0


def most_frequent(store: BettingStore, index: str) -> str:
    """Key with the largest id collection; ties go to the first key seen."""
    best_key: Hashable = ""
    best_count = 0
    for key, ids in store.index_items(index):
        if len(ids) > best_count:
            best_key, best_count = key, len(ids)
    return str(best_key)


def quick_stats(store: BettingStore) -> QuickStats:
    meta = store.metadata()
    bets = list(store.bets())
    total_won = math.fsum(returned(b) for b in bets if is_win(b.status))
    return QuickStats(
        total_bets=meta.total_bets,
        total_wagered=meta.total_wagered,
        total_won=total_won,
        profit_loss=total_won - meta.total_wagered,
        win_rate=win_rate(bets),
        roi=roi(store),
        most_bet_sport=most_frequent(store, "sport"),
        most_bet_player=most_frequent(store, "player"),
        average_odds=average_odds(store),
    )


def _aggregate(key: Hashable, bets: list[Bet]) -> dict[str, object]:
    wagered = math.fsum(b.wager for b in bets)
    won = math.fsum(returned(b) for b in bets if is_win(b.status))
    return {
        "key": key,
        "bets": len(bets),
        "wagered": wagered,
        "won": won,
        "profit_loss": won - wagered,
        "win_rate": win_rate(bets),
    }


def breakdown(store: BettingStore, dimension: str) -> pd.DataFrame:
    """
    Per-key aggregates for one dimension.

    Calendar dimensions (month/year/date) are sorted ascending; odds buckets
    follow their natural range order; others keep first-seen order.

    Raises
    ------
    KeyError for an unknown dimension.
    """
    if dimension not in DIMENSIONS:
        raise KeyError(f"unknown dimension {dimension!r}; expected one of {sorted(DIMENSIONS)}")
    rows = [
        _aggregate(key, [store.get(i) for i in ids])
        for key, ids in store.index_items(DIMENSIONS[dimension])
    ]
    df = pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)
    if dimension in _CALENDAR_DIMENSIONS:
        df = df.sort_values("key", kind="mergesort").reset_index(drop=True)
    elif dimension == "odds" and not df.empty:
        order = {b: i for i, b in enumerate(ODDS_BUCKETS)}
        df = df.sort_values("key", key=lambda s: s.map(order), kind="mergesort")
        df = df.reset_index(drop=True)
    return df


def streaks(store: BettingStore) -> Streaks:
    """
    Win/loss runs over settled, dated bets in placement order.

    Bets with other statuses (pending, void, cashed out) are skipped without
    breaking a run; bets with unparsed timestamps cannot be ordered and are
    left out.
    """
    dated = [b for b in store.bets() if b.placed_at is not None]
    dated.sort(key=lambda b: b.placed_at)  # type: ignore[arg-type,return-value]

    longest = {"win": 0, "loss": 0}
    kind, length = "", 0
    for bet in dated:
        if is_win(bet.status):
            outcome = "win"
        elif is_loss(bet.status):
            outcome = "loss"
        else:
            continue
        length = length + 1 if outcome == kind else 1
        kind = outcome
        longest[kind] = max(longest[kind], length)

    return Streaks(
        longest_win=longest["win"],
        longest_loss=longest["loss"],
        current_kind=kind,
        current_length=length,
    )
