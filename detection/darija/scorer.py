"""
Darija Scorer — weighted combination of the five Darija signals.

    confidence = Σ signal_i × weight_i        (clamped to [0, 1])
    is_darija  = confidence ≥ threshold
"""

from __future__ import annotations

import re
from typing import Optional

import structlog

from api.schemas import DarijaScore, SignalScores
from detection.darija.config import DarijaConfig
from detection.darija.signals import (
    code_switching_signal,
    idiomatic_signal,
    keyword_signal,
    morphological_signal,
    script_mixing_signal,
    tokenize,
    transliteration_indicators,
)
from detection.normalizer import matching_form

logger = structlog.get_logger()


class DarijaScorer:
    """Scores how strongly a text looks like Moroccan Darija."""

    def __init__(self, config: Optional[DarijaConfig] = None) -> None:
        self.config = config or DarijaConfig()
        self._code_switching = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.config.code_switching_patterns
        ]
        self._morphology = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.config.morphological_patterns
        ]

    def score(self, text: str) -> DarijaScore:
        folded = matching_form(text)
        if not folded:
            return DarijaScore()

        tokens = tokenize(folded)
        keyword_score, keyword_hits = keyword_signal(tokens, self.config.keywords)
        code_switching_score, _ = code_switching_signal(folded, self._code_switching)
        morphological_score, _ = morphological_signal(folded, self._morphology)
        idiomatic_score, idiom_hits = idiomatic_signal(folded, self.config.idiomatic_expressions)
        script_mixing_score, _ = script_mixing_signal(text)

        weights = self.config.weights
        weighted = (
            keyword_score * weights.keywords
            + code_switching_score * weights.code_switching
            + morphological_score * weights.morphological
            + idiomatic_score * weights.idiomatic
            + script_mixing_score * weights.script_mixing
        )
        confidence = max(0.0, min(weighted, 1.0))

        indicators = (
            keyword_hits
            + idiom_hits
            + transliteration_indicators(tokens, self.config.arabizi_digits)
        )[: self.config.max_indicators]

        logger.debug(
            "darija_scored",
            confidence=round(confidence, 3),
            keyword_score=round(keyword_score, 3),
            indicators=len(indicators),
        )

        return DarijaScore(
            is_darija=confidence >= self.config.threshold,
            confidence=confidence,
            details=SignalScores(
                keyword_score=keyword_score,
                code_switching_score=code_switching_score,
                morphological_score=morphological_score,
                idiomatic_score=idiomatic_score,
                script_mixing_score=script_mixing_score,
            ),
            indicators=indicators,
        )
