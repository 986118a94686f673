# src/betlog/store/indexer.py
# -----------------------------------------------------------------------------
# BettingStore: primary id -> Bet map plus incrementally maintained indices.
#
# Indices (values are ordered, duplicate-free id sequences)
# ---------------------------------------------------------
#   bet-level : date ("YYYY-MM-DD"), year (int), month ("YYYY-MM"), sport,
#               undated (bets whose placement timestamp did not parse)
#   leg-level : team, player, prop_type, odds (bucket label)
#
# Metadata: date range over parsed timestamps, distinct sports/teams/players/
# prop types, total bet count, total wagered.
#
# Design notes
# ------------
# - insert() validates first and then mutates; there is no await inside, so a
#   reader never sees an index entry without its primary-map entry.
# - Single writer: one ingestion run per store, no locking.
# -----------------------------------------------------------------------------
from __future__ import annotations

from collections.abc import Hashable, Iterator
from datetime import datetime
from typing import Any

import pandas as pd

from betlog.common.errors import DuplicateBetError
from betlog.common.models import Bet, DateRange, Metadata
from betlog.common.schema import BET_FRAME_DTYPES, LEG_FRAME_DTYPES, coerce_frame

BET_INDICES: tuple[str, ...] = ("date", "year", "month", "sport", "undated")
LEG_INDICES: tuple[str, ...] = ("team", "player", "prop_type", "odds")
INDEX_NAMES: tuple[str, ...] = BET_INDICES + LEG_INDICES

ODDS_BUCKETS: tuple[str, ...] = ("<1.5", "1.5-2.0", "2.0-3.0", "3.0-5.0", "5.0+")


def odds_bucket(odds: float) -> str:
    """Fixed odds ranges: [.., 1.5), [1.5, 2.0), [2.0, 3.0), [3.0, 5.0), [5.0, ..)."""
    if odds < 1.5:
        return "<1.5"
    if odds < 2.0:
        return "1.5-2.0"
    if odds < 3.0:
        return "2.0-3.0"
    if odds < 5.0:
        return "3.0-5.0"
    return "5.0+"


def _date_keys(dt: datetime) -> tuple[str, int, str]:
    return dt.strftime("%Y-%m-%d"), dt.year, dt.strftime("%Y-%m")


class BettingStore:
    """In-memory multi-index store of finalized bets."""

    def __init__(self) -> None:
        self._bets: dict[str, Bet] = {}
        self._indices: dict[str, dict[Hashable, list[str]]] = {name: {} for name in INDEX_NAMES}
        self._sports: set[str] = set()
        self._teams: set[str] = set()
        self._players: set[str] = set()
        self._prop_types: set[str] = set()
        self._total_wagered = 0.0
        self._start: datetime | None = None
        self._end: datetime | None = None

    # ------------------------------ write --------------------------------
    def _add(self, index: str, key: Hashable, bet_id: str) -> None:
        ids = self._indices[index].setdefault(key, [])
        if not ids or ids[-1] != bet_id:
            ids.append(bet_id)

    def insert(self, bet: Bet) -> None:
        """
        Add one finalized bet and update every index and the metadata.

        Raises
        ------
        DuplicateBetError if `bet.id` is already stored (store left unchanged).
        """
        if bet.id in self._bets:
            raise DuplicateBetError(bet.id)

        self._bets[bet.id] = bet

        if bet.placed_at is not None:
            day, year, month = _date_keys(bet.placed_at)
            self._add("date", day, bet.id)
            self._add("year", year, bet.id)
            self._add("month", month, bet.id)
            if self._start is None or bet.placed_at < self._start:
                self._start = bet.placed_at
            if self._end is None or bet.placed_at > self._end:
                self._end = bet.placed_at
        else:
            self._add("undated", "undated", bet.id)

        self._add("sport", bet.sport, bet.id)
        self._sports.add(bet.sport)
        self._total_wagered += bet.wager

        for leg in bet.legs:
            if leg.team:
                self._teams.add(leg.team)
                self._add("team", leg.team, bet.id)
            if leg.player:
                self._players.add(leg.player)
                self._add("player", leg.player, bet.id)
            if leg.prop_type:
                self._prop_types.add(leg.prop_type)
                self._add("prop_type", leg.prop_type, bet.id)
            self._add("odds", odds_bucket(leg.odds), bet.id)

    # ------------------------------ read ---------------------------------
    def get(self, bet_id: str) -> Bet:
        """Bet by id; KeyError when absent."""
        return self._bets[bet_id]

    def query(self, index: str, key: Hashable) -> tuple[str, ...]:
        """Ids filed under `key` in `index` (empty tuple for an unknown key)."""
        if index not in self._indices:
            raise KeyError(f"unknown index {index!r}; expected one of {list(INDEX_NAMES)}")
        return tuple(self._indices[index].get(key, ()))

    def keys(self, index: str) -> list[Hashable]:
        """Index keys in first-seen order."""
        if index not in self._indices:
            raise KeyError(f"unknown index {index!r}; expected one of {list(INDEX_NAMES)}")
        return list(self._indices[index])

    def index_items(self, index: str) -> Iterator[tuple[Hashable, tuple[str, ...]]]:
        for key in self.keys(index):
            yield key, tuple(self._indices[index][key])

    def metadata(self) -> Metadata:
        """Snapshot of store-level aggregates (safe to keep across later inserts)."""
        date_range = None
        if self._start is not None and self._end is not None:
            date_range = DateRange(start=self._start, end=self._end)
        return Metadata(
            date_range=date_range,
            sports=frozenset(self._sports),
            teams=frozenset(self._teams),
            players=frozenset(self._players),
            prop_types=frozenset(self._prop_types),
            total_bets=len(self._bets),
            total_wagered=self._total_wagered,
        )

    def bets(self) -> Iterator[Bet]:
        """Bets in insertion order."""
        return iter(self._bets.values())

    def __len__(self) -> int:
        return len(self._bets)

    def __contains__(self, bet_id: object) -> bool:
        return bet_id in self._bets

    # ------------------------------ export -------------------------------
    def to_frames(self) -> tuple[pd.DataFrame, pd.DataFrame]:
        """
        Flatten into (bets_df, legs_df) with canonical dtypes.

        Unparsed placement timestamps appear as NaT in `placed_at`; the source
        text stays in `placed_at_text`.
        """
        bet_rows: list[dict[str, Any]] = []
        leg_rows: list[dict[str, Any]] = []
        for bet in self._bets.values():
            bet_rows.append(
                {
                    "bet_id": bet.id,
                    "placed_at": bet.placed_at,
                    "placed_at_text": bet.placed_at_text,
                    "sport": bet.sport,
                    "league": bet.league,
                    "status": bet.status,
                    "kind": bet.kind.value,
                    "wager": bet.wager,
                    "potential_payout": bet.potential_payout,
                    "actual_payout": bet.actual_payout,
                    "winnings": bet.winnings,
                    "leg_count": bet.leg_count,
                }
            )
            for i, leg in enumerate(bet.legs):
                leg_rows.append(
                    {
                        "bet_id": bet.id,
                        "leg_index": i,
                        "player": leg.player,
                        "team": leg.team,
                        "prop_type": leg.prop_type,
                        "market": leg.market,
                        "odds": leg.odds,
                        "result": leg.result,
                        "event_time": leg.event_time,
                        "sport": leg.sport,
                        "league": leg.league,
                        "market_category": leg.market_category,
                        "bet_category": leg.bet_category,
                    }
                )
        bets_df = pd.DataFrame(bet_rows, columns=list(BET_FRAME_DTYPES))
        legs_df = pd.DataFrame(leg_rows, columns=list(LEG_FRAME_DTYPES))
        return coerce_frame(bets_df, BET_FRAME_DTYPES), coerce_frame(legs_df, LEG_FRAME_DTYPES)
