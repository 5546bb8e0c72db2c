"""
Rule-Based Classifier — the local rule engine behind the offline path.

Used when the caller forces `offline=True` and whenever the remote tier has
to be abandoned (timeout, low confidence, error). Keyword and script rules
only; runs in well under a millisecond.
"""

from __future__ import annotations

import re

from api.schemas import ClassifierResult, SupportedLanguage
from detection.classifiers.base_classifier import BaseClassifier
from detection.darija.lexicon import DARIJA_KEYWORDS
from detection.normalizer import matching_form

_ARABIC_RE = re.compile("[\u0600-\u06ff]")
_FRENCH_ACCENT_RE = re.compile("[àâäæçèéêëîïôœùûüÿ]", re.IGNORECASE)

# Arabic-script words that only Darija speakers write
ARABIC_DARIJA_MARKERS: tuple[str, ...] = (
    "واش", "غادي", "ماشي", "فين", "دابا", "بزاف", "مزيان", "لاباس", "حيت",
    "علاش", "كيفاش", "شنو", "بغيت", "ديال", "واخا", "صافي", "هادشي", "شحال",
)

FRENCH_WORDS: frozenset[str] = frozenset({
    "bonjour", "bonsoir", "merci", "je", "tu", "vous", "nous", "est", "suis",
    "les", "des", "une", "pour", "avec", "dans", "comment", "pourquoi", "oui",
    "non", "mais", "très", "voudrais", "aimerais", "parler", "conseiller",
    "allez", "s'il", "plaît", "c'est", "quoi", "votre", "mon", "pas",
})

ENGLISH_WORDS: frozenset[str] = frozenset({
    "the", "is", "are", "you", "hello", "thanks", "please", "what", "how",
    "with", "this", "that", "have", "want", "need", "my", "your", "today",
})


class RuleBasedClassifier(BaseClassifier):
    """Deterministic keyword/script rules (no model, no network)."""

    def __init__(self) -> None:
        super().__init__(name="offline-rules")

    async def classify(self, text: str) -> ClassifierResult:
        if not text or not text.strip():
            return self.unknown("empty")

        folded = matching_form(text)
        words = folded.split()

        if _ARABIC_RE.search(text):
            if any(marker in folded for marker in ARABIC_DARIJA_MARKERS):
                return self._verdict(SupportedLanguage.DARIJA, 0.85)
            return self._verdict(SupportedLanguage.ARABIC, 0.9)

        if _FRENCH_ACCENT_RE.search(text) or any(word in FRENCH_WORDS for word in words):
            return self._verdict(SupportedLanguage.FRENCH, 0.9)

        darija_count = sum(1 for word in words if word in DARIJA_KEYWORDS)
        if darija_count > 0:
            confidence = min(0.85, 0.7 + (darija_count / len(words)) * 0.3)
            return self._verdict(SupportedLanguage.DARIJA, confidence)

        if sum(1 for word in words if word in ENGLISH_WORDS) >= 2:
            return self._verdict(SupportedLanguage.ENGLISH, 0.7)

        return ClassifierResult(
            language=SupportedLanguage.UNKNOWN,
            confidence=0.5,
            provenance=self.name,
        )

    def _verdict(self, language: SupportedLanguage, confidence: float) -> ClassifierResult:
        return ClassifierResult(language=language, confidence=confidence, provenance=self.name)
