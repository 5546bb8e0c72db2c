"""
Script Analyzer — per-character script ratios and transliteration cues.

Classifies every non-space character by Unicode block, finds tokens that mix
Latin and Arabic letters and records which Arabizi transliteration pairs
(e.g. خ ↔ kh, ع ↔ 3) appear in either direction.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from api.schemas import ScriptAnalysis, ScriptType


class TransliterationRule(BaseModel):
    """One Arabic phoneme ↔ Latin spelling pair."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    arabic: str
    latin: str


# Digits only count when glued to Latin letters ("3lik", "sa7bi", "9alb").
DEFAULT_TRANSLITERATION_RULES: tuple[TransliterationRule, ...] = (
    TransliterationRule(pattern="kh", arabic="خ", latin=r"kh"),
    TransliterationRule(pattern="gh", arabic="غ", latin=r"gh"),
    TransliterationRule(pattern="ch", arabic="ش", latin=r"ch"),
    TransliterationRule(pattern="3", arabic="ع", latin=r"(?<=[a-z])3|3(?=[a-z])"),
    TransliterationRule(pattern="7", arabic="ح", latin=r"(?<=[a-z])7|7(?=[a-z])"),
    TransliterationRule(pattern="9", arabic="ق", latin=r"(?<=[a-z])9|9(?=[a-z])"),
    TransliterationRule(pattern="2", arabic="ء", latin=r"(?<=[a-z])2|2(?=[a-z])"),
    TransliterationRule(pattern="6", arabic="ط", latin=r"(?<=[a-z])6|6(?=[a-z])"),
    TransliterationRule(pattern="wach", arabic="واش", latin=r"\bwach\b"),
    TransliterationRule(pattern="had", arabic="هاد", latin=r"\bhad\b"),
)

_DOMINANT_THRESHOLD = 0.3
_PRESENCE_THRESHOLD = 0.1

_LATIN_LETTER_RE = re.compile("[A-Za-z\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u024f\u1e00-\u1eff]")
_ARABIC_LETTER_RE = re.compile("[\u0621-\u064a\u0671-\u06d3\u0750-\u077f\u08a0-\u08ff]")


def _is_latin(code: int) -> bool:
    return (
        0x41 <= code <= 0x5A
        or 0x61 <= code <= 0x7A
        or (0xC0 <= code <= 0x24F and code not in (0xD7, 0xF7))
        or 0x1E00 <= code <= 0x1EFF
    )


def _is_arabic(code: int) -> bool:
    if 0x660 <= code <= 0x669 or 0x6F0 <= code <= 0x6F9:
        return False  # Arabic-Indic and extended Arabic-Indic digits are numeric
    return (
        0x600 <= code <= 0x6FF
        or 0x750 <= code <= 0x77F
        or 0x8A0 <= code <= 0x8FF
        or 0xFB50 <= code <= 0xFDFF
        or 0xFE70 <= code <= 0xFEFF
    )


def _is_numeric(code: int) -> bool:
    return 0x30 <= code <= 0x39 or 0x660 <= code <= 0x669 or 0x6F0 <= code <= 0x6F9


class ScriptAnalyzer:
    """Pure, deterministic script analysis over normalised text."""

    def __init__(
        self,
        transliteration_rules: tuple[TransliterationRule, ...] = DEFAULT_TRANSLITERATION_RULES,
    ) -> None:
        self.transliteration_rules = transliteration_rules
        self._compiled = [
            (rule, re.compile(rule.arabic), re.compile(rule.latin, re.IGNORECASE))
            for rule in transliteration_rules
        ]

    def analyze(self, text: str) -> ScriptAnalysis:
        if not text or not text.strip():
            return ScriptAnalysis()

        latin, arabic, numeric, other = self._ratios(text)
        mixed_tokens = self.find_mixed_tokens(text)
        return ScriptAnalysis(
            latin_ratio=latin,
            arabic_ratio=arabic,
            numeric_ratio=numeric,
            other_ratio=other,
            dominant_script=self._dominant_script(latin, arabic),
            mixed_tokens=mixed_tokens,
            transliteration_patterns=self.detect_transliteration_patterns(text),
            is_bi_script=(
                (latin > _PRESENCE_THRESHOLD and arabic > _PRESENCE_THRESHOLD)
                or bool(mixed_tokens)
            ),
        )

    @staticmethod
    def _ratios(text: str) -> tuple[float, float, float, float]:
        counts = [0, 0, 0, 0]
        total = 0
        for char in text:
            if char.isspace():
                continue
            total += 1
            code = ord(char)
            if _is_latin(code):
                counts[0] += 1
            elif _is_arabic(code):
                counts[1] += 1
            elif _is_numeric(code):
                counts[2] += 1
            else:
                counts[3] += 1
        if total == 0:
            return 0.0, 0.0, 0.0, 0.0
        return tuple(count / total for count in counts)  # type: ignore[return-value]

    @staticmethod
    def _dominant_script(latin: float, arabic: float) -> ScriptType:
        if latin > arabic and latin > _DOMINANT_THRESHOLD:
            return ScriptType.MIXED if arabic > _PRESENCE_THRESHOLD else ScriptType.LATIN
        if arabic > latin and arabic > _DOMINANT_THRESHOLD:
            return ScriptType.MIXED if latin > _PRESENCE_THRESHOLD else ScriptType.ARABIC
        if latin > _PRESENCE_THRESHOLD and arabic > _PRESENCE_THRESHOLD:
            return ScriptType.MIXED
        return ScriptType.UNKNOWN

    @staticmethod
    def find_mixed_tokens(text: str) -> list[str]:
        """Whitespace tokens holding both a Latin and an Arabic letter."""
        return [
            token
            for token in text.split()
            if _LATIN_LETTER_RE.search(token) and _ARABIC_LETTER_RE.search(token)
        ]

    def detect_transliteration_patterns(self, text: str) -> list[str]:
        detected: list[str] = []
        for rule, arabic_re, latin_re in self._compiled:
            if rule.pattern in detected:
                continue
            if arabic_re.search(text) or latin_re.search(text):
                detected.append(rule.pattern)
        return detected

    def transliterate_to_latin(self, text: str) -> str:
        """Approximate Arabizi rendering of Arabic-script text."""
        # Longer Arabic spellings first so "واش" wins over its letters.
        ordered = sorted(self._compiled, key=lambda item: len(item[0].arabic), reverse=True)
        for rule, arabic_re, _ in ordered:
            text = arabic_re.sub(rule.pattern, text)
        return text
