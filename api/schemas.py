"""
Pydantic v2 models for the language-identification engine.
Every artifact flowing between pipeline stages is validated by these schemas;
`DetectionResult` is the sole contract consumed by chat UIs and persistence.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# ── Enums ──────────────────────────────────────────────────────────────────────

class SupportedLanguage(str, Enum):
    FRENCH = "french"
    ARABIC = "arabic"
    DARIJA = "darija"
    ENGLISH = "english"
    SPANISH = "spanish"
    GERMAN = "german"
    ITALIAN = "italian"
    PORTUGUESE = "portuguese"
    DUTCH = "dutch"
    RUSSIAN = "russian"
    CHINESE = "chinese"
    JAPANESE = "japanese"
    KOREAN = "korean"
    UNKNOWN = "unknown"


class ScriptType(str, Enum):
    LATIN = "latin"
    ARABIC = "arabic"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class DetectionSource(str, Enum):
    LOCAL_RULES = "local-rules"
    REMOTE_MODEL = "remote-model"
    CACHE = "cache"
    OFFLINE_FALLBACK = "offline-fallback"
    ERROR = "error"


class FallbackReason(str, Enum):
    TIMEOUT = "timeout"
    LOW_CONFIDENCE = "low_confidence"
    ERROR = "error"


# ── Inputs ─────────────────────────────────────────────────────────────────────

class DetectionOptions(BaseModel):
    offline: bool = False
    timeout_ms: float = Field(default=400.0, ge=0.0)
    min_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    bypass_cache: bool = False


class DetectRequest(BaseModel):
    """Payload accepted by POST /api/v1/detect."""
    text: str
    options: DetectionOptions = Field(default_factory=DetectionOptions)


# ── Stage outputs ──────────────────────────────────────────────────────────────

class ScriptAnalysis(BaseModel):
    latin_ratio: float = 0.0
    arabic_ratio: float = 0.0
    numeric_ratio: float = 0.0
    other_ratio: float = 0.0
    dominant_script: ScriptType = ScriptType.UNKNOWN
    mixed_tokens: list[str] = Field(default_factory=list)
    transliteration_patterns: list[str] = Field(default_factory=list)
    is_bi_script: bool = False


class SignalScores(BaseModel):
    keyword_score: float = 0.0
    code_switching_score: float = 0.0
    morphological_score: float = 0.0
    idiomatic_score: float = 0.0
    script_mixing_score: float = 0.0


class DarijaScore(BaseModel):
    is_darija: bool = False
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    details: SignalScores = Field(default_factory=SignalScores)
    indicators: list[str] = Field(default_factory=list)


class ClassifierResult(BaseModel):
    """Verdict of a general-purpose classifier (local or remote)."""
    language: SupportedLanguage = SupportedLanguage.UNKNOWN
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    provenance: str = "unknown"
    raw_label: Optional[str] = None


# ── Final result ───────────────────────────────────────────────────────────────

class DetectionResult(BaseModel):
    """Final output returned to the caller of `detect`."""
    language: SupportedLanguage = SupportedLanguage.UNKNOWN
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    script: ScriptType = ScriptType.UNKNOWN
    source: DetectionSource = DetectionSource.LOCAL_RULES
    processing_time_ms: float = Field(default=0.0, ge=0.0)
    indicators: list[str] = Field(default_factory=list)
    error: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


# ── Cache / metrics ────────────────────────────────────────────────────────────

class CacheEntry(BaseModel):
    result: DetectionResult
    inserted_at_ms: float
    hit_count: int = 0


class CacheStats(BaseModel):
    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0


class MetricsSnapshot(BaseModel):
    total_detections: int = 0
    average_processing_time_ms: float = 0.0
    average_confidence: float = 0.0
    errors: int = 0
    language_distribution: dict[str, int] = Field(default_factory=dict)
    source_distribution: dict[str, int] = Field(default_factory=dict)
