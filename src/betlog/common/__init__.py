# src/betlog/common/__init__.py
# -----------------------------------------------------------------------------
# Shared building blocks: data model, column schema, errors, logging, settings.
# -----------------------------------------------------------------------------
from __future__ import annotations
