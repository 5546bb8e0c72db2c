"""
Decision Merger — tie-break ladder over Darija, general and script analysis.

No single signal is reliable on its own for a low-resource, orthographically
loose dialect, so the rules below are evaluated in order and the first match
wins. Order encodes precedence, not confidence magnitude.

    1. darija > 0.35 and general = arabic and bi-script
    2. darija > 0.25 and ≥ 3 indicators and (bi-script or general = arabic)
    3. general < 0.6 and darija > 0.3 and ≥ 2 indicators
    4. ≥ 5 indicators and darija > 0.2
    5. ≥ 3 indicators and darija > 0.25
    6. otherwise: the general verdict, verbatim
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from api.schemas import (
    ClassifierResult,
    DarijaScore,
    DetectionResult,
    ScriptAnalysis,
    SupportedLanguage,
)


class MergeRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    bi_script_arabic_min: float = 0.35
    corroborated_min: float = 0.25
    corroborated_indicators: int = 3
    weak_general_max: float = 0.6
    weak_general_darija_min: float = 0.3
    weak_general_indicators: int = 2
    many_indicators: int = 5
    many_indicators_min: float = 0.2
    some_indicators: int = 3
    some_indicators_min: float = 0.25
    indicator_boost: float = 0.08
    indicator_boost_cap: int = 5


class DecisionMerger:
    """Combines the stage outputs into one `DetectionResult`."""

    def __init__(self, rules: Optional[MergeRules] = None) -> None:
        self.rules = rules or MergeRules()

    def merge(
        self,
        darija: DarijaScore,
        general: ClassifierResult,
        script: ScriptAnalysis,
    ) -> DetectionResult:
        rule = self._match_rule(darija, general, script)
        metadata = {
            "merge_rule": rule,
            "general_result": general.model_dump(mode="json"),
            "darija_analysis": darija.model_dump(mode="json"),
            "script_analysis": script.model_dump(mode="json"),
        }

        if rule != "general_verdict":
            return DetectionResult(
                language=SupportedLanguage.DARIJA,
                confidence=self.darija_confidence(darija),
                script=script.dominant_script,
                indicators=list(darija.indicators),
                metadata=metadata,
            )

        return DetectionResult(
            language=general.language,
            confidence=general.confidence,
            script=script.dominant_script,
            indicators=list(darija.indicators),
            metadata=metadata,
        )

    def _match_rule(
        self,
        darija: DarijaScore,
        general: ClassifierResult,
        script: ScriptAnalysis,
    ) -> str:
        r = self.rules
        confidence = darija.confidence
        indicators = len(darija.indicators)
        general_is_arabic = general.language == SupportedLanguage.ARABIC

        if confidence > r.bi_script_arabic_min and general_is_arabic and script.is_bi_script:
            return "darija_bi_script_arabic"
        if (
            confidence > r.corroborated_min
            and indicators >= r.corroborated_indicators
            and (script.is_bi_script or general_is_arabic)
        ):
            return "darija_corroborated"
        if (
            general.confidence < r.weak_general_max
            and confidence > r.weak_general_darija_min
            and indicators >= r.weak_general_indicators
        ):
            return "darija_weak_general"
        if indicators >= r.many_indicators and confidence > r.many_indicators_min:
            return "darija_many_indicators"
        if indicators >= r.some_indicators and confidence > r.some_indicators_min:
            return "darija_some_indicators"
        return "general_verdict"

    def darija_confidence(self, darija: DarijaScore) -> float:
        """Scorer confidence plus a bounded bonus per matched indicator."""
        boost = self.rules.indicator_boost * min(len(darija.indicators), self.rules.indicator_boost_cap)
        return min(darija.confidence + boost, 1.0)
