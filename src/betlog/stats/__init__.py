# src/betlog/stats/__init__.py
# -----------------------------------------------------------------------------
# Public surface of the stats package (pure functions over a finalized store).
# -----------------------------------------------------------------------------
from __future__ import annotations

from .engine import (
    DIMENSIONS,
    QuickStats,
    Streaks,
    average_odds,
    breakdown,
    most_frequent,
    quick_stats,
    roi,
    streaks,
)

__all__ = [
    "DIMENSIONS",
    "QuickStats",
    "Streaks",
    "average_odds",
    "breakdown",
    "most_frequent",
    "quick_stats",
    "roi",
    "streaks",
]
