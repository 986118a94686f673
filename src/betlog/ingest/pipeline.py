# src/betlog/ingest/pipeline.py
# -----------------------------------------------------------------------------
# Ingestion pipeline: document -> rows -> bets -> BettingStore.
#
# Responsibilities
# - extract rows (fatal document errors propagate to the caller),
# - apply configured column aliases,
# - feed rows through the RecordAssembler in fixed-size batches,
# - isolate every row in a failure boundary (recorded, never raised),
# - insert finalized bets into the store,
# - cooperatively yield every `yield_every` rows and at each batch boundary,
#   checking an optional cancel signal and reporting integer progress.
#
# Design notes
# - Yield points sit strictly between rows: never inside an assembler
#   transition or a store insert, so readers only see whole bets.
# - Progress = floor((completed_batches + fraction_of_batch) / batches * 100),
#   clamped to be non-decreasing, and always ends at exactly 100.
# - Cancellation drops the open (unfinished) bet and raises
#   IngestionCancelled with the consistent partial store attached.
# -----------------------------------------------------------------------------
from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from betlog.common.contracts import IngestSettings
from betlog.common.errors import DuplicateBetError, IngestionCancelled, RowProcessingError
from betlog.common.logging import (
    DUPLICATE_BET,
    ROW_ERROR,
    Diagnostics,
    LogFn,
    RunLedger,
    RunRecord,
    Timed,
    log_stdout,
    sha256_file,
)
from betlog.common.models import Bet
from betlog.common.schema import apply_rename_map
from betlog.ingest.assembler import RecordAssembler
from betlog.ingest.extract import Document, RawRow, extract_rows
from betlog.ingest.loaders import load_document
from betlog.store.indexer import BettingStore

ProgressFn = Callable[[int], None]


class _Progress:
    """Monotonic integer progress forwarded to an optional callback."""

    def __init__(self, callback: ProgressFn | None) -> None:
        self.callback = callback
        self.last = 0

    def report(self, completed_batches: int, fraction: float, total_batches: int) -> None:
        if total_batches <= 0:
            value = 100
        else:
            value = int((completed_batches + fraction) / total_batches * 100)
        value = max(self.last, min(100, value))
        self.last = value
        if self.callback is not None:
            self.callback(value)


class IngestionPipeline:
    """
    One ingestion run against one store (single writer).

    Parameters
    ----------
    settings    : batch size, yield cadence, column aliases
    log         : message sink (default: timestamped stdout)
    diagnostics : collection receiving row-scoped problems; a fresh one is
                  created when omitted (and echoes to `log` if settings.verbose)
    """

    def __init__(
        self,
        settings: IngestSettings | None = None,
        *,
        log: LogFn = log_stdout,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.settings = settings or IngestSettings()
        self.log = log
        if diagnostics is None:
            diagnostics = Diagnostics(log=log if self.settings.verbose else None)
        self.diagnostics = diagnostics
        self.row_errors: list[RowProcessingError] = []
        self.rows_in = 0

    # --------------------------- row handling ----------------------------
    def _commit(self, store: BettingStore, bet: Bet, row_number: int) -> None:
        try:
            store.insert(bet)
        except DuplicateBetError as e:
            self.diagnostics.record(row_number, DUPLICATE_BET, str(e))

    def _process_row(
        self, assembler: RecordAssembler, store: BettingStore, row: RawRow, row_number: int
    ) -> None:
        try:
            bet = assembler.feed(row, row_number)
        except Exception as e:  # row-scoped boundary: record and move on
            err = RowProcessingError(row_number, f"{type(e).__name__}: {e}")
            self.row_errors.append(err)
            self.diagnostics.record(row_number, ROW_ERROR, err.message)
            return
        if bet is not None:
            self._commit(store, bet, row_number)

    async def _checkpoint(
        self,
        cancel: asyncio.Event | None,
        store: BettingStore,
        assembler: RecordAssembler,
        processed: int,
    ) -> None:
        await asyncio.sleep(0)
        if cancel is not None and cancel.is_set():
            assembler.discard()
            self.log(f"[ingest] cancelled after {processed} rows; {len(store)} bets kept")
            raise IngestionCancelled(store, processed)

    # ------------------------------- run ---------------------------------
    async def run(
        self,
        document: Document,
        on_progress: ProgressFn | None = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> BettingStore:
        """
        Ingest `document` into a fresh store and return it.

        Diagnostics, row errors and the row count describe the latest run only.

        Raises
        ------
        MissingHeaderError / DocumentDecodeError : before any row is processed
        IngestionCancelled                       : cancel signal observed
        """
        self.diagnostics.entries.clear()
        self.row_errors = []
        self.rows_in = 0

        rows = extract_rows(document)
        aliases = self.settings.rename_map
        if aliases:
            rows = [apply_rename_map(r, aliases) for r in rows]
        self.rows_in = len(rows)

        store = BettingStore()
        assembler = RecordAssembler(self.diagnostics)
        size = self.settings.batch_size
        every = self.settings.yield_every
        batches = [rows[i : i + size] for i in range(0, len(rows), size)]
        total = len(batches)
        progress = _Progress(on_progress)
        self.log(f"[ingest] rows={len(rows)} batches={total} batch_size={size}")

        processed = 0
        for b_idx, batch in enumerate(batches):
            for j, row in enumerate(batch, start=1):
                processed += 1
                self._process_row(assembler, store, row, processed)
                if processed % every == 0 and j < len(batch):
                    await self._checkpoint(cancel, store, assembler, processed)
                    progress.report(b_idx, j / len(batch), total)

            await self._checkpoint(cancel, store, assembler, processed)
            if b_idx == total - 1:
                last = assembler.finish()
                if last is not None:
                    self._commit(store, last, processed)
            progress.report(b_idx + 1, 0.0, total)

        if total == 0:
            progress.report(0, 0.0, 0)

        self.log(
            f"[ingest] done: rows_in={len(rows)} bets={len(store)} "
            f"row_errors={len(self.row_errors)} diagnostics={len(self.diagnostics)}"
        )
        return store


def ingest(
    document: Document,
    on_progress: ProgressFn | None = None,
    *,
    settings: IngestSettings | None = None,
    log: LogFn = log_stdout,
    diagnostics: Diagnostics | None = None,
) -> BettingStore:
    """Synchronous wrapper around IngestionPipeline.run (owns its event loop)."""
    pipeline = IngestionPipeline(settings, log=log, diagnostics=diagnostics)
    return asyncio.run(pipeline.run(document, on_progress))


@dataclass
class IngestReport:
    store: BettingStore
    diagnostics: Diagnostics
    rows_in: int
    duration_s: float


def ingest_file(
    path: Path,
    on_progress: ProgressFn | None = None,
    *,
    settings: IngestSettings | None = None,
    log: LogFn = log_stdout,
) -> IngestReport:
    """
    Load a betting-history export from disk and ingest it.

    Appends a RunRecord to settings.ledger_path when configured (best-effort,
    a failing ledger never fails the run).
    """
    cfg = settings or IngestSettings()
    p = Path(path).expanduser()
    log(f"[ingest] reading: {p}")
    pipeline = IngestionPipeline(cfg, log=log)
    with Timed() as t:
        document = load_document(p, sheet=cfg.sheet)
        store = asyncio.run(pipeline.run(document, on_progress))
    duration = t.elapsed or 0.0

    if cfg.ledger_path is not None:
        try:
            RunLedger(Path(cfg.ledger_path)).append(
                RunRecord(
                    ts=datetime.now(),
                    input_path=str(p),
                    sha256_in=sha256_file(p)[:12],
                    rows_in=pipeline.rows_in,
                    bets_out=len(store),
                    n_diagnostics=len(pipeline.diagnostics),
                    duration_s=duration,
                )
            )
        except OSError as e:
            log(f"[ingest] ledger append failed ({type(e).__name__}: {e})")

    return IngestReport(
        store=store,
        diagnostics=pipeline.diagnostics,
        rows_in=pipeline.rows_in,
        duration_s=duration,
    )
