# src/betlog/checks/guards.py
# -----------------------------------------------------------------------------
# Purpose
# -------
# Reusable *guards* that re-derive the store invariants from scratch:
#   1) No dangling ids: every id in every index exists in the primary map.
#   2) Totals: metadata bet count / wagered match the primary map.
#   3) Date range: metadata range is the exact min/max of parsed timestamps.
#
# Called from tests and from the CLI after ingestion; they never mutate.
# -----------------------------------------------------------------------------
from __future__ import annotations

import math

from betlog.store.indexer import INDEX_NAMES, BettingStore

__all__ = ["ensure_no_dangling_ids", "ensure_store_consistent"]


def ensure_no_dangling_ids(store: BettingStore) -> None:
    """
    Raises
    ------
    AssertionError listing up to five (index, key, id) offenders.
    """
    offenders: list[tuple[str, object, str]] = []
    for name in INDEX_NAMES:
        for key, ids in store.index_items(name):
            offenders.extend((name, key, i) for i in ids if i not in store)
    if offenders:
        raise AssertionError(
            f"{len(offenders)} index entries point at missing bets, e.g. {offenders[:5]}"
        )


def ensure_store_consistent(store: BettingStore, *, rel_tol: float = 1e-9) -> None:
    """
    Enforce invariants 1-3 on a store.

    Raises
    ------
    AssertionError describing the first violated invariant.
    """
    ensure_no_dangling_ids(store)

    meta = store.metadata()
    bets = list(store.bets())
    if meta.total_bets != len(bets):
        raise AssertionError(f"total_bets={meta.total_bets} but store holds {len(bets)} bets")

    wagered = math.fsum(b.wager for b in bets)
    if not math.isclose(meta.total_wagered, wagered, rel_tol=rel_tol, abs_tol=1e-9):
        raise AssertionError(f"total_wagered={meta.total_wagered!r} but bets sum to {wagered!r}")

    stamps = [b.placed_at for b in bets if b.placed_at is not None]
    if not stamps:
        if meta.date_range is not None:
            raise AssertionError("date_range set but no bet has a parsed timestamp")
        return
    if meta.date_range is None:
        raise AssertionError("date_range missing although dated bets exist")
    if (meta.date_range.start, meta.date_range.end) != (min(stamps), max(stamps)):
        raise AssertionError(
            f"date_range {meta.date_range.start}..{meta.date_range.end} "
            f"!= {min(stamps)}..{max(stamps)}"
        )
