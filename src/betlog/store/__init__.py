# src/betlog/store/__init__.py
# -----------------------------------------------------------------------------
# Public surface of the store package.
# - BettingStore: in-memory multi-index bet store
# - odds_bucket / ODDS_BUCKETS: fixed odds ranges used by the odds index
# -----------------------------------------------------------------------------
from __future__ import annotations

from .indexer import INDEX_NAMES, ODDS_BUCKETS, BettingStore, odds_bucket

__all__ = ["BettingStore", "INDEX_NAMES", "ODDS_BUCKETS", "odds_bucket"]
