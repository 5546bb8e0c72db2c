"""
Text Normalizer — strips invisible characters and Arabic diacritics.

Diacritics (tashkil) are rare in chat text and only fragment the lexical
features, so they are removed before any scoring.
"""

from __future__ import annotations

import re
import unicodedata

# Zero-width chars, bidi marks/embeddings/isolates (incl. Arabic letter mark),
# Mongolian vowel separator, word joiner, BOM, soft hyphen
_INVISIBLE_RE = re.compile(
    "[\u00ad\u061c\u180e\u200b-\u200f\u202a-\u202e\u2060-\u2064\u2066-\u2069\ufeff]"
)

# Harakat, Quranic annotation marks and superscript alef
_TASHKIL_RE = re.compile(
    "[\u0610-\u061a\u064b-\u065f\u0670\u06d6-\u06dc\u06df-\u06e8\u06ea-\u06ed]"
)

_TATWEEL = "\u0640"
_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile(r"[^\w\s']")


def normalize(text: str) -> str:
    """Collapse whitespace, drop invisible/diacritic noise and trim."""
    if not text:
        return ""
    text = unicodedata.normalize("NFC", text)
    text = _INVISIBLE_RE.sub("", text)
    text = _TASHKIL_RE.sub("", text)
    text = text.replace(_TATWEEL, "")
    return _WHITESPACE_RE.sub(" ", text).strip()


def matching_form(text: str) -> str:
    """Lower-cased, punctuation-free form used by lexical matchers."""
    text = _PUNCTUATION_RE.sub(" ", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()
