"""
Darija scorer configuration — immutable calibration knobs.

Weights and threshold are empirical defaults; swap in another `DarijaConfig`
to re-calibrate for a new corpus or locale without touching the scorer.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from config.settings import Settings
from detection.darija.lexicon import (
    ARABIZI_DIGITS,
    CODE_SWITCHING_PATTERNS,
    DARIJA_KEYWORDS,
    IDIOMATIC_EXPRESSIONS,
    MORPHOLOGICAL_PATTERNS,
)


class SignalWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    keywords: float = Field(default=0.45, ge=0.0)
    code_switching: float = Field(default=0.30, ge=0.0)
    morphological: float = Field(default=0.15, ge=0.0)
    idiomatic: float = Field(default=0.08, ge=0.0)
    script_mixing: float = Field(default=0.02, ge=0.0)


class DarijaConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    threshold: float = Field(default=0.65, ge=0.0, le=1.0)
    weights: SignalWeights = Field(default_factory=SignalWeights)
    keywords: frozenset[str] = DARIJA_KEYWORDS
    code_switching_patterns: tuple[str, ...] = CODE_SWITCHING_PATTERNS
    morphological_patterns: tuple[str, ...] = MORPHOLOGICAL_PATTERNS
    idiomatic_expressions: tuple[str, ...] = IDIOMATIC_EXPRESSIONS
    arabizi_digits: str = ARABIZI_DIGITS
    max_indicators: int = Field(default=10, ge=0)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DarijaConfig":
        settings = settings or Settings()
        return cls(
            threshold=settings.darija_threshold,
            weights=SignalWeights(
                keywords=settings.weight_keywords,
                code_switching=settings.weight_code_switching,
                morphological=settings.weight_morphological,
                idiomatic=settings.weight_idiomatic,
                script_mixing=settings.weight_script_mixing,
            ),
            max_indicators=settings.max_indicators,
        )
