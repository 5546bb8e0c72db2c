"""
Darija Signal Extractors — five independent scorers over normalised text.

Each extractor returns `(score, indicators)` with `score` in [0, 1]. They are
pure functions over the text and a fixed table, so they can run in any order
or in parallel.
"""

from __future__ import annotations

import re
from typing import Iterable, Pattern

_ARABIC_CHAR_RE = re.compile("[\u0600-\u06ff\u0750-\u077f]")
_LATIN_CHAR_RE = re.compile(r"[a-zA-Z]")

_CODE_SWITCH_WINDOW = 100
_MORPHOLOGY_WINDOW = 50
_IDIOM_INCREMENT = 0.1
_SCRIPT_MIX_FLOOR = 0.2


def tokenize(text: str) -> list[str]:
    """Whitespace tokens of at least two characters."""
    return [token for token in text.split() if len(token) > 1]


def _count_matches(patterns: Iterable[Pattern[str]], text: str) -> int:
    return sum(len(pattern.findall(text)) for pattern in patterns)


def keyword_signal(tokens: list[str], keywords: frozenset[str]) -> tuple[float, list[str]]:
    if not tokens:
        return 0.0, []
    matched = [token for token in tokens if token in keywords]
    indicators = [f"keyword:{token}" for token in dict.fromkeys(matched)]
    return len(matched) / len(tokens), indicators


def code_switching_signal(text: str, patterns: Iterable[Pattern[str]]) -> tuple[float, list[str]]:
    if not text:
        return 0.0, []
    matches = _count_matches(patterns, text)
    return min(matches / (len(text) / _CODE_SWITCH_WINDOW), 1.0), []


def morphological_signal(text: str, patterns: Iterable[Pattern[str]]) -> tuple[float, list[str]]:
    if not text:
        return 0.0, []
    matches = _count_matches(patterns, text)
    return min(matches / (len(text) / _MORPHOLOGY_WINDOW), 1.0), []


def idiomatic_signal(text: str, expressions: Iterable[str]) -> tuple[float, list[str]]:
    found = [expression for expression in expressions if expression in text]
    return min(len(found) * _IDIOM_INCREMENT, 1.0), [f"idiom:{expression}" for expression in found]


def script_mixing_signal(text: str) -> tuple[float, list[str]]:
    """Share of the minority script; below 0.2 it is loanword noise."""
    arabic = len(_ARABIC_CHAR_RE.findall(text))
    latin = len(_LATIN_CHAR_RE.findall(text))
    if arabic == 0 or latin == 0:
        return 0.0, []
    ratio = min(arabic, latin) / (arabic + latin)
    return (ratio if ratio > _SCRIPT_MIX_FLOOR else 0.0), []


def transliteration_indicators(tokens: list[str], digits: str) -> list[str]:
    """Arabizi digits written inside Latin words, e.g. "3lik" or "sa7bi"."""
    found: list[str] = []
    for token in tokens:
        if not _LATIN_CHAR_RE.search(token):
            continue
        for digit in digits:
            if digit in token and digit not in found:
                found.append(digit)
    return [f"transliteration:{digit}" for digit in found]
