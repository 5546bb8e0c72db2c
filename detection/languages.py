"""
Language code mapping shared by the statistical and remote classifiers.
"""

from __future__ import annotations

from typing import Optional

from api.schemas import SupportedLanguage

_CODE_MAP: dict[str, SupportedLanguage] = {
    "ar": SupportedLanguage.ARABIC,
    "arb": SupportedLanguage.ARABIC,
    "arabic": SupportedLanguage.ARABIC,
    "ar-ma": SupportedLanguage.DARIJA,
    "ary": SupportedLanguage.DARIJA,
    "darija": SupportedLanguage.DARIJA,
    "fr": SupportedLanguage.FRENCH,
    "french": SupportedLanguage.FRENCH,
    "en": SupportedLanguage.ENGLISH,
    "english": SupportedLanguage.ENGLISH,
    "es": SupportedLanguage.SPANISH,
    "de": SupportedLanguage.GERMAN,
    "it": SupportedLanguage.ITALIAN,
    "pt": SupportedLanguage.PORTUGUESE,
    "nl": SupportedLanguage.DUTCH,
    "ru": SupportedLanguage.RUSSIAN,
    "zh": SupportedLanguage.CHINESE,
    "zh-cn": SupportedLanguage.CHINESE,
    "zh-tw": SupportedLanguage.CHINESE,
    "ja": SupportedLanguage.JAPANESE,
    "ko": SupportedLanguage.KOREAN,
    # Arabic-script neighbours that n-gram models confuse with short Arabic text
    "fa": SupportedLanguage.ARABIC,
    "ur": SupportedLanguage.ARABIC,
    "ps": SupportedLanguage.ARABIC,
}


def to_supported_language(code: Optional[str]) -> SupportedLanguage:
    """Map an ISO code or model label to a `SupportedLanguage` (else unknown)."""
    if not code:
        return SupportedLanguage.UNKNOWN
    key = code.strip().lower().replace("_", "-")
    if key in _CODE_MAP:
        return _CODE_MAP[key]
    try:
        return SupportedLanguage(key)
    except ValueError:
        return SupportedLanguage.UNKNOWN
