# src/betlog/common/errors.py
# -----------------------------------------------------------------------------
# Error taxonomy for ingestion.
#
# Fatal (abort the run, propagate to the caller):
#   - MissingHeaderError   : rows present but no usable header row
#   - DocumentDecodeError  : the source document could not be decoded at all
#
# Row-scoped (recorded in diagnostics, ingestion continues):
#   - RowProcessingError   : a single row failed classification/normalization
#   - DuplicateBetError    : a finalized bet reuses an id already in the store
#
# Control flow:
#   - IngestionCancelled   : cooperative cancel observed at a yield point; the
#                            partially built store travels with the exception
#
# Malformed timestamps are *values* (see ingest.timestamps.MalformedTimestamp),
# not exceptions.
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from betlog.store.indexer import BettingStore


class BetlogError(Exception):
    """Base class for all errors raised by this package."""


class MissingHeaderError(BetlogError, ValueError):
    """The document has data rows but no identifiable header row."""


class DocumentDecodeError(BetlogError):
    """The document bytes/text could not be decoded into rows."""


class RowProcessingError(BetlogError):
    """A single row failed; carries its 1-based data row number."""

    def __init__(self, row_number: int, message: str) -> None:
        super().__init__(f"row {row_number}: {message}")
        self.row_number = row_number
        self.message = message


class DuplicateBetError(BetlogError, ValueError):
    """A bet id is already present in the store."""

    def __init__(self, bet_id: str) -> None:
        super().__init__(f"bet id already present in store: {bet_id!r}")
        self.bet_id = bet_id


class IngestionCancelled(BetlogError):
    """Raised when the cancel signal is observed; `store` is consistent but partial."""

    def __init__(self, store: BettingStore, rows_processed: int) -> None:
        super().__init__(f"ingestion cancelled after {rows_processed} rows")
        self.store = store
        self.rows_processed = rows_processed
