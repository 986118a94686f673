# src/betlog/cli.py
# -----------------------------------------------------------------------------
# Betting History Analytics – Command Line Interface (Typer)
#
#   ingest     : load an export, build the store, print quick stats,
#                optionally write flat bets/legs tables
#   breakdown  : per-dimension aggregates (month, sport, player, ...)
#   streaks    : longest win/loss runs and the current run
#
# Every command rebuilds the store from the file; nothing is persisted
# between invocations other than optional exports and the run ledger.
# -----------------------------------------------------------------------------
from __future__ import annotations

import traceback
from pathlib import Path
from typing import Optional

import typer

from betlog.checks.guards import ensure_store_consistent
from betlog.common.contracts import IngestSettings, load_settings
from betlog.common.logging import log_silent, log_stdout
from betlog.ingest.pipeline import IngestReport, ingest_file
from betlog.stats.engine import DIMENSIONS, breakdown, quick_stats, streaks

# Typer application entry-point. We disable the default shell completion for stability in CI.
app = typer.Typer(add_completion=False, no_args_is_help=True)


# ------------------------------ helpers ---------------------------------
def _settings(config: Optional[str]) -> IngestSettings:
    return load_settings(Path(config)) if config else IngestSettings()


def _run_ingest(path: str, config: Optional[str], quiet: bool) -> IngestReport:
    """Ingest `path`; fatal errors print a traceback and exit with code 1."""
    cfg = _settings(config)
    log = log_silent if quiet else log_stdout
    last = {"pct": -1}

    def _progress(pct: int) -> None:
        if not quiet and pct != last["pct"]:
            last["pct"] = pct
            typer.echo(f"[ingest] progress {pct}%")

    try:
        report = ingest_file(Path(path), _progress, settings=cfg, log=log)
    except Exception as e:
        typer.echo("[ingest] failed:")
        typer.echo("".join(traceback.format_exception(type(e), e, e.__traceback__)))
        raise typer.Exit(code=1)
    ensure_store_consistent(report.store)
    return report


# ------------------------------- ingest ---------------------------------
@app.command()
def ingest(
    path: str = typer.Argument(..., help="Betting history export (.xlsx, .xls, .csv or .xml)"),
    config: Optional[str] = typer.Option(None, help="Path to configs/ingest.yaml"),
    export_dir: Optional[str] = typer.Option(
        None, help="Write bets.csv and legs.csv (flat tables) into this directory"
    ),
    quiet: bool = typer.Option(False, help="Only print the summary"),
) -> None:
    """
    Build the in-memory store from an export and print headline numbers.
    """
    report = _run_ingest(path, config, quiet)
    qs = quick_stats(report.store)
    meta = report.store.metadata()

    typer.echo(f"[ingest] rows={report.rows_in} bets={qs.total_bets} ({report.duration_s:.2f}s)")
    if meta.date_range is not None:
        typer.echo(f"[ingest] range: {meta.date_range.start:%Y-%m-%d} .. {meta.date_range.end:%Y-%m-%d}")
    for kind, n in sorted(report.diagnostics.counts().items()):
        typer.echo(f"[ingest] diagnostics {kind}: {n}")
    typer.echo(f"total_wagered  {qs.total_wagered:.2f}")
    typer.echo(f"total_won      {qs.total_won:.2f}")
    typer.echo(f"profit_loss    {qs.profit_loss:.2f}")
    typer.echo(f"win_rate       {qs.win_rate:.1f}%")
    typer.echo(f"roi            {qs.roi:.1f}%")
    typer.echo(f"average_odds   {qs.average_odds:.2f}")
    typer.echo(f"top_sport      {qs.most_bet_sport or '-'}")
    typer.echo(f"top_player     {qs.most_bet_player or '-'}")

    if export_dir:
        out = Path(export_dir)
        out.mkdir(parents=True, exist_ok=True)
        bets_df, legs_df = report.store.to_frames()
        bets_df.to_csv(out / "bets.csv", index=False)
        legs_df.to_csv(out / "legs.csv", index=False)
        typer.echo(f"[ingest] wrote: {out / 'bets.csv'}, {out / 'legs.csv'}")


# ------------------------------ breakdown -------------------------------
@app.command("breakdown")
def breakdown_cmd(
    path: str = typer.Argument(..., help="Betting history export"),
    by: str = typer.Option("month", "--by", help=f"One of: {', '.join(DIMENSIONS)}"),
    config: Optional[str] = typer.Option(None, help="Path to configs/ingest.yaml"),
    out: Optional[str] = typer.Option(None, help="Also write the table to this CSV path"),
) -> None:
    """
    Aggregate bets, wagered, won, profit/loss and win rate per key.
    """
    if by not in DIMENSIONS:
        typer.echo(f"[breakdown] unknown dimension {by!r}; expected one of {list(DIMENSIONS)}")
        raise typer.Exit(code=2)
    report = _run_ingest(path, config, quiet=True)
    df = breakdown(report.store, by)
    typer.echo(df.to_string(index=False, float_format=lambda v: f"{v:.2f}"))
    if out:
        out_p = Path(out)
        out_p.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out_p, index=False)
        typer.echo(f"[breakdown] wrote: {out_p}")


# ------------------------------- streaks --------------------------------
@app.command("streaks")
def streaks_cmd(
    path: str = typer.Argument(..., help="Betting history export"),
    config: Optional[str] = typer.Option(None, help="Path to configs/ingest.yaml"),
) -> None:
    """
    Longest winning/losing runs over settled bets, plus the run still going.
    """
    report = _run_ingest(path, config, quiet=True)
    s = streaks(report.store)
    typer.echo(f"longest_win    {s.longest_win}")
    typer.echo(f"longest_loss   {s.longest_loss}")
    current = f"{s.current_length} {s.current_kind}" if s.current_kind else "-"
    typer.echo(f"current        {current}")


if __name__ == "__main__":
    app()
