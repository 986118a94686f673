# src/betlog/common/logging.py
# -----------------------------------------------------------------------------
# Dependency-light logging, diagnostics & run-ledger utilities used by ingestion.
# - log_stdout: timestamped console output (the default `log` sink)
# - Diagnostics: per-run collection of row-scoped problems (no global state)
# - sha256_file: content hash for provenance
# - RunRecord / RunLedger: append-only CSV of ingest runs
# - Timed: minimal context manager for durations
# -----------------------------------------------------------------------------
from __future__ import annotations

import csv
import hashlib
import sys
import time
from collections import Counter
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import TracebackType

LogFn = Callable[[str], None]


def log_stdout(msg: str) -> None:
    """Timestamped line to stdout (no external logging dependency)."""
    ts = datetime.now().isoformat(timespec="seconds")
    sys.stdout.write(f"[{ts}] {msg}\n")
    sys.stdout.flush()


def log_silent(msg: str) -> None:
    """Sink that drops messages (tests, library callers that only want diagnostics)."""
    return None


# Diagnostic kinds recorded by the pipeline/assembler
MALFORMED_TIMESTAMP = "malformed_timestamp"
ROW_ERROR = "row_error"
ORPHAN_LEG = "orphan_leg"
DUPLICATE_BET = "duplicate_bet"
SYNTHESIZED_ID = "synthesized_id"


@dataclass(frozen=True)
class DiagnosticEntry:
    row_number: int
    kind: str
    message: str


@dataclass
class Diagnostics:
    """
    Collection of non-fatal problems observed during one ingestion run.

    Each entry is also forwarded to `log` when one is attached, so console
    output and the returned collection never disagree.
    """

    log: LogFn | None = None
    entries: list[DiagnosticEntry] = field(default_factory=list)

    def record(self, row_number: int, kind: str, message: str) -> None:
        entry = DiagnosticEntry(row_number=row_number, kind=kind, message=message)
        self.entries.append(entry)
        if self.log is not None:
            self.log(f"[ingest] row {row_number} {kind}: {message}")

    def of_kind(self, kind: str) -> list[DiagnosticEntry]:
        return [e for e in self.entries if e.kind == kind]

    def counts(self) -> dict[str, int]:
        return dict(Counter(e.kind for e in self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DiagnosticEntry]:
        return iter(self.entries)


@dataclass
class RunRecord:
    ts: datetime
    input_path: str
    sha256_in: str
    rows_in: int
    bets_out: int
    n_diagnostics: int
    duration_s: float


class RunLedger:
    """Append-only CSV ledger for ingest runs (best-effort provenance)."""

    def __init__(self, ledger_path: Path) -> None:
        self.ledger_path = ledger_path
        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, rec: RunRecord) -> None:
        write_header = not self.ledger_path.exists()
        with self.ledger_path.open("a", newline="") as f:
            w = csv.writer(f)
            if write_header:
                w.writerow(
                    [
                        "ts",
                        "input_path",
                        "sha256_in",
                        "rows_in",
                        "bets_out",
                        "n_diagnostics",
                        "duration_s",
                    ]
                )
            w.writerow(
                [
                    rec.ts.isoformat(timespec="seconds"),
                    rec.input_path,
                    rec.sha256_in,
                    rec.rows_in,
                    rec.bets_out,
                    rec.n_diagnostics,
                    f"{rec.duration_s:.3f}",
                ]
            )


def sha256_file(path: Path, chunk_size: int = 1 << 20) -> str:
    """Streaming SHA-256 of a file (chunked) for reproducibility/provenance."""
    h = hashlib.sha256()
    with path.open("rb") as f:
        while True:
            b = f.read(chunk_size)
            if not b:
                break
            h.update(b)
    return h.hexdigest()


class Timed:
    """Context manager to measure durations of small blocks."""

    def __init__(self) -> None:
        self.start: float | None = None
        self.elapsed: float | None = None

    def __enter__(self) -> Timed:
        self.start = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        end = time.perf_counter()
        self.elapsed = end - (self.start or end)
