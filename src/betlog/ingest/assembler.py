# src/betlog/ingest/assembler.py
# -----------------------------------------------------------------------------
# RecordAssembler: group RawRows into parent bets + legs.
#
# States
# ------
#   IDLE          no bet open
#   ACCUMULATING  a bet is open and collecting leg rows
#
# Transitions (per row, in input order; rows are tagged by classify_row first)
#   PARENT / PARENT_UNDATED, ACCUMULATING -> emit open bet, open new one
#   PARENT / PARENT_UNDATED, IDLE         -> open new bet
#   LEG, ACCUMULATING                     -> append leg to the open bet
#   LEG, IDLE                             -> orphan, discarded (diagnostic)
#   UNKNOWN                               -> ignored
#   finish() while ACCUMULATING           -> emit the last bet
#
# A PARENT_UNDATED row repeating the open bet's slip id is a continuation and
# is treated as a leg.
#
# Every transition is computed fully before state is touched, so a row that
# raises leaves the open bet exactly as it was.
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from betlog.common import schema as cols
from betlog.common.logging import (
    MALFORMED_TIMESTAMP,
    ORPHAN_LEG,
    SYNTHESIZED_ID,
    Diagnostics,
)
from betlog.common.models import Bet, BetLeg
from betlog.ingest.classify import (
    RowKind,
    bet_category,
    classify_row,
    market_category,
    row_has_leg_data,
    split_bet_type,
    team_from_match,
)
from betlog.ingest.extract import RawRow
from betlog.ingest.normalize import has_value, is_result_word, text_field, to_float
from betlog.ingest.timestamps import MalformedTimestamp, looks_like_timestamp, parse_timestamp

UNKNOWN_SPORT = "Unknown"


class AssemblerState(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


# builder scalar field -> (source column, numeric?)
_FILLABLE: dict[str, tuple[str, bool]] = {
    "status": (cols.STATUS, False),
    "league": (cols.LEAGUE, False),
    "wager": (cols.WAGER, True),
    "potential_payout": (cols.POTENTIAL_PAYOUT, True),
    "actual_payout": (cols.PAYOUT, True),
    "winnings": (cols.WINNINGS, True),
}


@dataclass
class _BetBuilder:
    """Mutable in-progress bet; frozen into a Bet by build()."""

    id: str
    id_synthesized: bool
    placed_at: datetime | None
    placed_at_text: str
    parent_row: RawRow
    status: str | None = None
    league: str | None = None
    wager: float | None = None
    potential_payout: float | None = None
    actual_payout: float | None = None
    winnings: float | None = None
    legs: list[BetLeg] = field(default_factory=list)

    def pending_fills(self, row: RawRow) -> dict[str, object]:
        """Values `row` would set; only unset fields are eligible (first non-empty wins)."""
        out: dict[str, object] = {}
        for name, (col, numeric) in _FILLABLE.items():
            if getattr(self, name) is not None or not has_value(row, col):
                continue
            out[name] = to_float(row[col]) if numeric else text_field(row, col)
        if self.id_synthesized and has_value(row, cols.BET_SLIP_ID):
            out["id"] = text_field(row, cols.BET_SLIP_ID)
            out["id_synthesized"] = False
        return out

    def apply(self, updates: dict[str, object]) -> None:
        for name, value in updates.items():
            setattr(self, name, value)

    @property
    def sport(self) -> str:
        return self.league or UNKNOWN_SPORT

    def build(self) -> Bet:
        legs = list(self.legs)
        if not legs and row_has_leg_data(self.parent_row):
            legs.append(_build_leg(self.parent_row, self, None, None))
        return Bet(
            id=self.id,
            placed_at=self.placed_at,
            placed_at_text=self.placed_at_text,
            sport=self.sport,
            league=self.league or "",
            wager=self.wager or 0.0,
            potential_payout=self.potential_payout or 0.0,
            actual_payout=self.actual_payout or 0.0,
            winnings=self.winnings or 0.0,
            status=self.status or "",
            legs=tuple(legs),
        )


def _build_leg(
    row: RawRow,
    bet: _BetBuilder,
    row_number: int | None,
    diagnostics: Diagnostics | None,
) -> BetLeg:
    bet_type = text_field(row, cols.BET_TYPE)
    market = text_field(row, cols.MARKET)
    match = text_field(row, cols.MATCH)
    player, prop_type = split_bet_type(bet_type)

    # Result carries either the settled label or the event time
    result_text = text_field(row, cols.RESULT)
    event_time: datetime | None = None
    if looks_like_timestamp(result_text):
        parsed = parse_timestamp(result_text)
        if isinstance(parsed, MalformedTimestamp):
            if diagnostics is not None and row_number is not None:
                diagnostics.record(row_number, MALFORMED_TIMESTAMP, f"event time: {parsed.reason}")
        else:
            event_time = parsed
        result = text_field(row, cols.STATUS)
    else:
        result = result_text if is_result_word(result_text) else text_field(row, cols.STATUS)

    league = text_field(row, cols.LEAGUE) or (bet.league or "")
    category = bet_category(market)
    if category == "Other":
        category = bet_category(prop_type)

    return BetLeg(
        player=player,
        team=team_from_match(match),
        prop_type=prop_type,
        line=" ".join(p for p in (bet_type, market) if p),
        market=market,
        odds=to_float(row.get(cols.PRICE)),
        result=result,
        event_time=event_time,
        sport=league or bet.sport,
        league=league,
        market_category=market_category(market),
        bet_category=category,
        bet_type=bet_type,
        match=match,
    )


class RecordAssembler:
    """
    Stateful row grouper.

    Parameters
    ----------
    diagnostics : optional per-run collection for malformed timestamps,
                  orphan legs and synthesized ids.
    """

    def __init__(self, diagnostics: Diagnostics | None = None) -> None:
        self.diagnostics = diagnostics
        self._current: _BetBuilder | None = None
        self._rows_seen = 0
        self.orphan_legs = 0

    @property
    def state(self) -> AssemblerState:
        return AssemblerState.IDLE if self._current is None else AssemblerState.ACCUMULATING

    def _note(self, row_number: int, kind: str, message: str) -> None:
        if self.diagnostics is not None:
            self.diagnostics.record(row_number, kind, message)

    def _open(self, row: RawRow, row_number: int) -> _BetBuilder:
        text = text_field(row, cols.DATE_PLACED)
        parsed = parse_timestamp(text)
        placed_at: datetime | None = None
        if isinstance(parsed, MalformedTimestamp):
            self._note(row_number, MALFORMED_TIMESTAMP, f"date placed: {parsed.reason}")
        else:
            placed_at = parsed

        slip_id = text_field(row, cols.BET_SLIP_ID)
        synthesized = not slip_id
        if synthesized:
            slip_id = f"row-{row_number}"
            self._note(row_number, SYNTHESIZED_ID, f"missing Bet Slip ID, using {slip_id!r}")

        builder = _BetBuilder(
            id=slip_id,
            id_synthesized=synthesized,
            placed_at=placed_at,
            placed_at_text=text,
            parent_row=dict(row),
        )
        builder.apply(builder.pending_fills(row))
        return builder

    def _is_continuation(self, row: RawRow) -> bool:
        cur = self._current
        return (
            cur is not None
            and not cur.id_synthesized
            and text_field(row, cols.BET_SLIP_ID) == cur.id
        )

    def feed(self, row: RawRow, row_number: int | None = None) -> Bet | None:
        """
        Consume one row; returns a finalized Bet when this row closes the open one.
        """
        self._rows_seen += 1
        n = self._rows_seen if row_number is None else row_number
        kind = classify_row(row)

        if kind is RowKind.PARENT_UNDATED and self._is_continuation(row):
            kind = RowKind.LEG

        if kind in (RowKind.PARENT, RowKind.PARENT_UNDATED):
            nxt = self._open(row, n)
            emitted = self._current.build() if self._current is not None else None
            self._current = nxt
            return emitted

        if kind is RowKind.LEG:
            cur = self._current
            if cur is None:
                self.orphan_legs += 1
                self._note(n, ORPHAN_LEG, "leg row before any parent bet; discarded")
                return None
            leg = _build_leg(row, cur, n, self.diagnostics)
            updates = cur.pending_fills(row)
            cur.legs.append(leg)
            cur.apply(updates)
            return None

        return None

    def finish(self) -> Bet | None:
        """End of input: emit the open bet (if any) and return to IDLE."""
        cur, self._current = self._current, None
        return cur.build() if cur is not None else None

    def discard(self) -> None:
        """Drop the open bet without emitting it (cancellation)."""
        self._current = None
