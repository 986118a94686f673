# src/betlog/__init__.py
# -----------------------------------------------------------------------------
# Betting History Analytics
#
# Ingest sportsbook betting-history exports (spreadsheet/CSV or SpreadsheetML
# XML), group rows into parent bets + legs, index them in memory and compute
# aggregate views (quick stats, ROI, breakdowns, streaks).
# -----------------------------------------------------------------------------
from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
