# src/betlog/ingest/__init__.py
# -----------------------------------------------------------------------------
# Public surface of the ingest package.
# Kept small and explicit so downstream callers (CLI/tests) rely on stable
# names:
#   extract_rows / load_document   : source -> RawRows
#   parse_timestamp                : sportsbook timestamp text -> datetime
#   RecordAssembler                : RawRows -> Bets
#   IngestionPipeline / ingest     : batched, cooperative end-to-end run
# -----------------------------------------------------------------------------
from __future__ import annotations

from .assembler import RecordAssembler
from .extract import TabularDocument, XmlTableDocument, extract_rows
from .loaders import load_document
from .pipeline import IngestionPipeline, IngestReport, ingest, ingest_file
from .timestamps import MalformedTimestamp, format_timestamp, parse_timestamp

__all__ = [
    "extract_rows",
    "TabularDocument",
    "XmlTableDocument",
    "load_document",
    "parse_timestamp",
    "format_timestamp",
    "MalformedTimestamp",
    "RecordAssembler",
    "IngestionPipeline",
    "IngestReport",
    "ingest",
    "ingest_file",
]
