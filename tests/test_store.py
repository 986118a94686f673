# tests/test_store.py
from __future__ import annotations

import math
from datetime import datetime

import numpy as np
import pytest

from betlog.common.errors import DuplicateBetError
from betlog.common.models import Bet, BetLeg
from betlog.store.indexer import INDEX_NAMES, BettingStore, odds_bucket


def _bet(bet_id: str, placed_at: datetime | None, wager: float = 10.0, **kw) -> Bet:
    return Bet(id=bet_id, placed_at=placed_at, wager=wager, **kw)


@pytest.mark.parametrize(
    ("odds", "bucket"),
    [(1.0, "<1.5"), (1.49, "<1.5"), (1.5, "1.5-2.0"), (1.99, "1.5-2.0"), (2.0, "2.0-3.0"),
     (3.0, "3.0-5.0"), (4.99, "3.0-5.0"), (5.0, "5.0+"), (12.0, "5.0+"), (0.0, "<1.5")],
)
def test_odds_bucket_edges(odds: float, bucket: str) -> None:
    assert odds_bucket(odds) == bucket


def test_insert_updates_indices_and_metadata() -> None:
    store = BettingStore()
    legs = (
        BetLeg(player="Patrick Mahomes", team="Chiefs", prop_type="Passing Yards", odds=1.9),
        BetLeg(player="Jalen Hurts", team="Chiefs", prop_type="Rushing Yards", odds=2.4),
    )
    store.insert(_bet("A", datetime(2025, 2, 9, 16, 8), 10.0, sport="NFL", legs=legs))
    store.insert(_bet("B", datetime(2024, 12, 31, 9, 0), 5.5, sport="NBA"))

    assert store.query("date", "2025-02-09") == ("A",)
    assert store.query("year", 2025) == ("A",)
    assert store.query("year", 2024) == ("B",)
    assert store.query("month", "2024-12") == ("B",)
    assert store.query("sport", "NFL") == ("A",)
    # two legs on the same team file the bet once
    assert store.query("team", "Chiefs") == ("A",)
    assert store.query("player", "Jalen Hurts") == ("A",)
    assert store.query("prop_type", "Passing Yards") == ("A",)
    assert store.query("odds", "1.5-2.0") == ("A",)
    assert store.query("odds", "2.0-3.0") == ("A",)
    assert store.query("sport", "MLB") == ()

    meta = store.metadata()
    assert meta.total_bets == 2
    assert np.isclose(meta.total_wagered, 15.5)
    assert meta.date_range is not None
    assert meta.date_range.start == datetime(2024, 12, 31, 9, 0)
    assert meta.date_range.end == datetime(2025, 2, 9, 16, 8)
    assert meta.sports == {"NFL", "NBA"}
    assert meta.teams == {"Chiefs"}
    assert meta.players == {"Patrick Mahomes", "Jalen Hurts"}
    assert meta.prop_types == {"Passing Yards", "Rushing Yards"}


def test_undated_bets_are_segregated() -> None:
    store = BettingStore()
    store.insert(_bet("U1", None, 3.0))
    assert store.query("undated", "undated") == ("U1",)
    assert store.keys("date") == []
    assert store.metadata().date_range is None
    assert store.metadata().total_bets == 1


def test_duplicate_id_leaves_store_unchanged() -> None:
    store = BettingStore()
    store.insert(_bet("A", datetime(2025, 1, 1, 12, 0), 10.0, sport="NFL"))
    before = store.metadata()
    with pytest.raises(DuplicateBetError):
        store.insert(_bet("A", datetime(2020, 1, 1, 12, 0), 99.0, sport="MLB"))
    assert store.metadata() == before
    assert store.keys("sport") == ["NFL"]


def test_get_and_query_errors() -> None:
    store = BettingStore()
    with pytest.raises(KeyError):
        store.get("missing")
    with pytest.raises(KeyError):
        store.query("nope", "x")
    assert "missing" not in store
    assert len(store) == 0


def test_metadata_is_a_snapshot() -> None:
    store = BettingStore()
    store.insert(_bet("A", datetime(2025, 1, 1, 12, 0), sport="NFL"))
    snap = store.metadata()
    store.insert(_bet("B", datetime(2025, 1, 2, 12, 0), sport="NBA"))
    assert snap.total_bets == 1
    assert snap.sports == {"NFL"}


def test_total_wagered_matches_sum_over_many_inserts() -> None:
    rng = np.random.default_rng(11)
    wagers = rng.uniform(0.5, 250.0, size=500).round(2)
    store = BettingStore()
    for i, w in enumerate(wagers):
        store.insert(_bet(f"B{i}", datetime(2025, 1, 1 + i % 28, 12, 0), float(w)))
    assert math.isclose(store.metadata().total_wagered, math.fsum(wagers), rel_tol=1e-12)
    for name in INDEX_NAMES:
        for _, ids in store.index_items(name):
            for i in ids:
                assert store.get(i).id == i


def test_bets_are_immutable() -> None:
    bet = _bet("A", None, legs=[BetLeg(player="X")])
    assert isinstance(bet.legs, tuple)
    with pytest.raises(AttributeError):
        bet.wager = 1.0  # type: ignore[misc]


def test_to_frames_shapes_and_dtypes() -> None:
    store = BettingStore()
    store.insert(
        _bet("A", datetime(2025, 2, 9, 16, 8), 10.0, sport="NFL",
             legs=(BetLeg(player="P", odds=1.9), BetLeg(player="Q", odds=2.1)))
    )
    store.insert(_bet("U", None, 4.0, placed_at_text=""))
    bets_df, legs_df = store.to_frames()
    assert list(bets_df["bet_id"]) == ["A", "U"]
    assert bets_df["placed_at"].dtype.kind == "M"
    assert bets_df["placed_at"].isna().tolist() == [False, True]
    assert bets_df["kind"].tolist() == ["PARLAY", "EMPTY"]
    assert len(legs_df) == 2
    assert legs_df["leg_index"].tolist() == [0, 1]
