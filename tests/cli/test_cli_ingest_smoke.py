# tests/cli/test_cli_ingest_smoke.py
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from betlog.cli import app

runner = CliRunner()


@pytest.fixture()
def history_csv(tmp_path: Path, sample_rows) -> Path:
    p = tmp_path / "history.csv"
    pd.DataFrame(sample_rows[1:], columns=sample_rows[0]).to_csv(p, index=False)
    return p


def test_cli_ingest_smoke(tmp_path: Path, history_csv: Path) -> None:
    out_dir = tmp_path / "export"
    res = runner.invoke(app, ["ingest", str(history_csv), "--export-dir", str(out_dir), "--quiet"])
    assert res.exit_code == 0, res.stdout
    assert "bets=3" in res.stdout
    assert "top_sport      NFL" in res.stdout

    bets = pd.read_csv(out_dir / "bets.csv")
    legs = pd.read_csv(out_dir / "legs.csv")
    assert bets["bet_id"].tolist() == ["ABC123", "DEF456", "GHI789"]
    assert bets["leg_count"].tolist() == [2, 1, 2]
    assert len(legs) == 5
    assert set(legs["bet_id"]) <= set(bets["bet_id"])


def test_cli_ingest_reports_progress(history_csv: Path) -> None:
    res = runner.invoke(app, ["ingest", str(history_csv)])
    assert res.exit_code == 0, res.stdout
    assert "[ingest] progress 100%" in res.stdout


def test_cli_breakdown_and_streaks(tmp_path: Path, history_csv: Path) -> None:
    out_p = tmp_path / "by_sport.csv"
    res = runner.invoke(app, ["breakdown", str(history_csv), "--by", "sport", "--out", str(out_p)])
    assert res.exit_code == 0, res.stdout
    df = pd.read_csv(out_p)
    assert df["key"].tolist() == ["NFL", "NBA"]
    assert df["bets"].tolist() == [2, 1]

    res = runner.invoke(app, ["streaks", str(history_csv)])
    assert res.exit_code == 0, res.stdout
    assert "longest_loss   2" in res.stdout
    assert "current        2 loss" in res.stdout


def test_cli_unknown_dimension_exits_2(history_csv: Path) -> None:
    res = runner.invoke(app, ["breakdown", str(history_csv), "--by", "weekday"])
    assert res.exit_code == 2


def test_cli_missing_file_exits_1(tmp_path: Path) -> None:
    res = runner.invoke(app, ["ingest", str(tmp_path / "missing.csv"), "--quiet"])
    assert res.exit_code == 1
    assert "[ingest] failed:" in res.stdout
