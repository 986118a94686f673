# tests/test_normalize.py
from __future__ import annotations

import numpy as np
import pytest

from betlog.ingest.normalize import is_loss, is_result_word, is_win, text_field, to_float


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("10", 10.0),
        (" 2.10 ", 2.10),
        ("$1,250.50", 1250.50),
        ("£7.5", 7.5),
        ("-5", -5.0),
        ("(12.00)", -12.0),
        (".5", 0.5),
        (3, 3.0),
        (1.9, 1.9),
        ("", 0.0),
        ("N/A", 0.0),
        ("1.2.3", 0.0),
        (None, 0.0),
        (float("nan"), 0.0),
        ("inf", 0.0),
    ],
)
def test_to_float_defaults_to_zero(text: object, expected: float) -> None:
    assert np.isclose(to_float(text), expected)


def test_text_field_absent_vs_present() -> None:
    row = {"Status": "  Won ", "League": ""}
    assert text_field(row, "Status") == "Won"
    assert text_field(row, "League") == ""
    assert text_field(row, "Match") == ""


def test_status_comparisons_accept_both_vocabularies() -> None:
    for s in ("Won", "won", "WIN", " Win "):
        assert is_win(s)
        assert not is_loss(s)
    for s in ("Lost", "lose", "LOSS"):
        assert is_loss(s)
        assert not is_win(s)
    assert not is_result_word("Pending")
    assert not is_result_word("")
