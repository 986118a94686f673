# src/betlog/common/models.py
# -----------------------------------------------------------------------------
# Typed bet records produced by the assembler and owned by the store.
#
# - BetLeg : one proposition inside a bet (owned by exactly one Bet)
# - Bet    : a parent bet-slip with its finalized, ordered legs
# - Metadata / DateRange : read-only snapshot of store-level aggregates
#
# All records are frozen; legs are tuples, so an inserted Bet cannot change.
# `placed_at is None` is the explicit "unparsed timestamp" marker; the source
# text is always kept in `placed_at_text`.
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class BetKind(str, Enum):
    SINGLE = "SINGLE"
    PARLAY = "PARLAY"
    EMPTY = "EMPTY"  # no leg rows could be attached


@dataclass(frozen=True)
class BetLeg:
    player: str = ""
    team: str = ""
    prop_type: str = ""
    line: str = ""
    market: str = ""
    odds: float = 0.0
    result: str = ""
    event_time: datetime | None = None
    sport: str = ""
    league: str = ""
    market_category: str = "Other"
    bet_category: str = "Other"
    bet_type: str = ""
    match: str = ""


@dataclass(frozen=True)
class Bet:
    id: str
    placed_at: datetime | None
    placed_at_text: str = ""
    sport: str = ""
    league: str = ""
    wager: float = 0.0
    potential_payout: float = 0.0
    actual_payout: float = 0.0
    winnings: float = 0.0
    status: str = ""
    legs: tuple[BetLeg, ...] = ()
    leg_count: int = field(init=False)
    kind: BetKind = field(init=False)

    def __post_init__(self) -> None:
        # frozen: derived fields go through object.__setattr__
        object.__setattr__(self, "legs", tuple(self.legs))
        object.__setattr__(self, "leg_count", len(self.legs))
        if len(self.legs) >= 2:
            kind = BetKind.PARLAY
        elif len(self.legs) == 1:
            kind = BetKind.SINGLE
        else:
            kind = BetKind.EMPTY
        object.__setattr__(self, "kind", kind)

    @property
    def has_timestamp(self) -> bool:
        return self.placed_at is not None


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Metadata:
    date_range: DateRange | None
    sports: frozenset[str]
    teams: frozenset[str]
    players: frozenset[str]
    prop_types: frozenset[str]
    total_bets: int
    total_wagered: float
