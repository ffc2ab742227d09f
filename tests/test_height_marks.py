from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.cad.height_marks import is_height_mark, numeric_candidate, parses_as_float


def test_keyword_marks():
    assert is_height_mark("ОТМ +3.600")
    assert is_height_mark("отм. 0.000")
    assert is_height_mark("EL 12.450")
    assert is_height_mark("el")
    assert is_height_mark("▽ +1.200")
    assert is_height_mark("Δ")
    assert is_height_mark("H=3000")
    assert is_height_mark("h = 2.7")


def test_numeric_marks():
    assert is_height_mark("12.450")
    assert is_height_mark("+3,600")
    assert is_height_mark("-0.150")
    assert is_height_mark("100")


def test_non_marks():
    assert not is_height_mark("Wall")
    assert not is_height_mark("AB")
    assert not is_height_mark("")
    assert not is_height_mark("   ")
    assert not is_height_mark(None)
    assert not is_height_mark("12")
    assert not is_height_mark("...")
    assert not is_height_mark("1.2.3")
    assert not is_height_mark("3+4")


def test_numeric_candidate_keeps_order():
    assert numeric_candidate("Ур пола +3,600 м") == "+3,600"
    assert numeric_candidate("A1-B2") == "1-2"


def test_parses_as_float_never_raises():
    assert parses_as_float("+3,600")
    assert parses_as_float(".5")
    assert parses_as_float("5.")
    assert not parses_as_float("1-2")
    assert not parses_as_float("+-1")
    assert not parses_as_float("")


def test_only_ascii_digits_count():
    assert not is_height_mark("١٢٣")
    assert not is_height_mark("١٢.٤٥٠")
    assert numeric_candidate("١٢٣ 4.5") == "4.5"
    assert not parses_as_float("١٢٣")
