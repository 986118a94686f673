# src/betlog/checks/__init__.py
from __future__ import annotations

from .guards import ensure_no_dangling_ids, ensure_store_consistent

__all__ = ["ensure_no_dangling_ids", "ensure_store_consistent"]
