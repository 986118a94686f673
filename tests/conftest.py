# tests/conftest.py
from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

# Ensure src/ is on sys.path for test runtime
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from betlog.common.schema import SOURCE_COLUMNS  # noqa: E402

RowFactory = Callable[..., list[str]]

# keyword -> source column
_KW = {
    "date": "Date Placed",
    "status": "Status",
    "league": "League",
    "match": "Match",
    "bet_type": "Bet Type",
    "market": "Market",
    "price": "Price",
    "wager": "Wager",
    "winnings": "Winnings",
    "payout": "Payout",
    "potential": "Potential Payout",
    "result": "Result",
    "slip": "Bet Slip ID",
}


def make_cells(**kw: str) -> list[str]:
    """One data row in SOURCE_COLUMNS order; unspecified cells are ""."""
    by_col = {_KW[k]: v for k, v in kw.items()}
    return [by_col.get(c, "") for c in SOURCE_COLUMNS]


def parlay_rows() -> list[list[str]]:
    """Header + a two-leg NFL parlay + a single NBA bet + a lost two-leg parlay."""
    return [
        list(SOURCE_COLUMNS),
        make_cells(
            date="9 Feb 2025 @ 4:08pm",
            status="Won",
            league="NFL",
            bet_type="MULTIPLE",
            wager="10",
            payout="35.50",
            potential="35.50",
            slip="ABC123",
        ),
        make_cells(
            match="Chiefs vs Eagles",
            bet_type="Patrick Mahomes - Passing Yards",
            market="Over 250.5",
            price="1.90",
            result="Win",
        ),
        make_cells(
            match="Chiefs vs Eagles",
            bet_type="Jalen Hurts - Rushing Yards",
            market="Over 45.5",
            price="1.87",
            result="Win",
        ),
        make_cells(
            date="10 Feb 2025 @ 7:30pm",
            status="Lost",
            league="NBA",
            match="Lakers vs Celtics",
            bet_type="LeBron James - Points",
            market="Under 27.5",
            price="2.05",
            wager="20",
            potential="41.00",
            result="Lose",
            slip="DEF456",
        ),
        make_cells(
            date="3 Mar 2025 @ 12:15am",
            status="Lost",
            league="NFL",
            bet_type="MULTIPLE",
            wager="5",
            potential="60",
            slip="GHI789",
        ),
        make_cells(
            match="Bills vs Ravens",
            bet_type="Josh Allen - Anytime Touchdown Scorer",
            market="Yes",
            price="3.25",
            result="Lose",
        ),
        make_cells(
            match="Bills vs Ravens",
            bet_type="Patrick Mahomes - Passing Yards",
            market="Over 270.5",
            price="5.50",
            result="Win",
        ),
    ]


@pytest.fixture()
def sample_rows() -> list[list[str]]:
    return parlay_rows()


@pytest.fixture()
def row_factory() -> RowFactory:
    return make_cells


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root (one level above tests/)."""
    return ROOT


@pytest.fixture(scope="session")
def config_dir(project_root: Path) -> Path:
    """Path to configs/ directory."""
    return project_root / "configs"


@pytest.fixture(scope="session")
def config_files(config_dir: Path) -> list[Path]:
    """All YAML files in configs/."""
    return sorted(config_dir.glob("*.yaml"))


@pytest.fixture(scope="session")
def loaded_configs(config_files: list[Path]) -> dict[str, dict[str, Any]]:
    """Loaded YAML content keyed by filename."""
    out: dict[str, dict[str, Any]] = {}
    for p in config_files:
        with p.open("r", encoding="utf-8") as fh:
            out[p.name] = yaml.safe_load(fh) or {}
    return out
