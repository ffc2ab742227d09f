"""Heuristic detection of elevation-mark text ("ОТМ +3.600", "EL 12.450", ...)."""

from __future__ import annotations

import re
from typing import Optional

# Частые ключевые слова в отметках высоты.
HEIGHT_MARK_KEYWORDS = ("ОТМ", "EL", "▽", "Δ", "H=", "H =")

_NUMERIC_CHARS = frozenset(".,+-")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


def numeric_candidate(text: str) -> str:
    return "".join(ch for ch in text if "0" <= ch <= "9" or ch in _NUMERIC_CHARS)


def parses_as_float(candidate: str) -> bool:
    return _FLOAT_RE.fullmatch(candidate.replace(",", ".")) is not None


def is_height_mark(text: Optional[str]) -> bool:
    """Return True when ``text`` looks like an elevation mark.

    Keywords are the precise signal. The numeric fallback accepts any text whose
    digits/signs/separators form a number of at least three characters, so short
    numeric fragments are accepted as well.
    """
    if text is None or not text.strip():
        return False

    clean = text.upper()
    if any(keyword in clean for keyword in HEIGHT_MARK_KEYWORDS):
        return True

    candidate = numeric_candidate(text)
    if len(candidate) < 3 or not any("0" <= ch <= "9" for ch in candidate):
        return False
    return parses_as_float(candidate)
