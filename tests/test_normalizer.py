"""
Tests for the text normaliser and the script analyser.
"""

import pytest

from api.schemas import ScriptType
from detection.normalizer import matching_form, normalize
from detection.script_analyzer import ScriptAnalyzer, TransliterationRule


# ── Normalizer ────────────────────────────────────────────────────────────────

class TestNormalize:
    def test_collapses_whitespace(self):
        assert normalize("  wach   nta \n mezyan  ") == "wach nta mezyan"

    def test_strips_zero_width_characters(self):
        assert normalize("wa\u200bch\u200d nta\ufeff") == "wach nta"

    def test_strips_bidi_marks(self):
        assert normalize("\u202bsalam\u202c \u200fkhoya") == "salam khoya"
        assert normalize("\u061c\u0645\u0631\u062d\u0628\u0627") == "\u0645\u0631\u062d\u0628\u0627"
        assert normalize("wach\u180e nta") == "wach nta"

    def test_strips_tashkil(self):
        voweled = "م\u064eر\u0652ح\u064eب\u064bا"
        assert normalize(voweled) == "مرحبا"

    def test_strips_tatweel(self):
        assert normalize("م\u0640\u0640\u0640رحبا") == "مرحبا"

    def test_composes_to_nfc(self):
        assert normalize("cafe\u0301") == "café"

    def test_empty_and_blank(self):
        assert normalize("") == ""
        assert normalize(" \u200b \t") == ""

    @pytest.mark.parametrize("text", [
        "  Bonjour,\u200b   comment allez-vous? ",
        "و\u064eاش لاباس",
        "salam مزيان",
    ])
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once


class TestMatchingForm:
    def test_lowercases_and_drops_punctuation(self):
        assert matching_form("Wach nta MEZYAN?!") == "wach nta mezyan"

    def test_keeps_apostrophes(self):
        assert matching_form("C'est bon.") == "c'est bon"

    def test_keeps_arabizi_digits(self):
        assert matching_form("3lik, sa7bi!") == "3lik sa7bi"


# ── Script Analyzer ───────────────────────────────────────────────────────────

class TestScriptAnalyzer:
    def setup_method(self):
        self.analyzer = ScriptAnalyzer()

    def test_latin_text(self):
        analysis = self.analyzer.analyze("hello world")
        assert analysis.latin_ratio == 1.0
        assert analysis.dominant_script == ScriptType.LATIN
        assert analysis.is_bi_script is False

    def test_arabic_text(self):
        analysis = self.analyzer.analyze("مرحبا كيف حالك؟")
        assert analysis.arabic_ratio == 1.0
        assert analysis.dominant_script == ScriptType.ARABIC

    def test_mixed_text(self):
        analysis = self.analyzer.analyze("salam ana مزيان بزاف")
        assert analysis.dominant_script == ScriptType.MIXED
        assert analysis.is_bi_script is True

    def test_numeric_ratio(self):
        analysis = self.analyzer.analyze("123 abc")
        assert analysis.numeric_ratio == pytest.approx(0.5)
        assert analysis.latin_ratio == pytest.approx(0.5)

    def test_extended_arabic_indic_digits_are_numeric(self):
        analysis = self.analyzer.analyze("\u06f1\u06f2\u06f3\u06f4")
        assert analysis.numeric_ratio == 1.0
        assert analysis.arabic_ratio == 0.0
        assert analysis.dominant_script == ScriptType.UNKNOWN

    def test_ratios_ignore_whitespace(self):
        analysis = self.analyzer.analyze("a  b   c")
        assert analysis.latin_ratio == 1.0

    def test_empty_text(self):
        analysis = self.analyzer.analyze("")
        assert analysis.dominant_script == ScriptType.UNKNOWN
        assert analysis.latin_ratio == 0.0
        assert analysis.is_bi_script is False

    def test_symbols_only_is_unknown(self):
        analysis = self.analyzer.analyze("!!! ??? ...")
        assert analysis.other_ratio == 1.0
        assert analysis.dominant_script == ScriptType.UNKNOWN

    def test_mixed_token_makes_text_bi_script(self):
        analysis = self.analyzer.analyze("salamمرحبا hello world friends")
        assert analysis.mixed_tokens == ["salamمرحبا"]
        assert analysis.is_bi_script is True

    def test_transliteration_patterns_latin(self):
        patterns = self.analyzer.analyze("3lik a khoya, sa7bi").transliteration_patterns
        assert "kh" in patterns
        assert "3" in patterns
        assert "7" in patterns

    def test_transliteration_patterns_arabic(self):
        patterns = self.analyzer.analyze("واش خويا").transliteration_patterns
        assert "wach" in patterns
        assert "kh" in patterns

    def test_bare_numbers_are_not_transliteration(self):
        patterns = self.analyzer.analyze("call 3 times at 7").transliteration_patterns
        assert "3" not in patterns
        assert "7" not in patterns

    def test_transliterate_to_latin(self):
        assert self.analyzer.transliterate_to_latin("واش") == "wach"
        assert self.analyzer.transliterate_to_latin("خويا").startswith("kh")

    def test_custom_rules(self):
        analyzer = ScriptAnalyzer((TransliterationRule(pattern="sh", arabic="ش", latin="sh"),))
        assert analyzer.analyze("shkoun").transliteration_patterns == ["sh"]


class TestBiScriptRoundTrip:
    @pytest.mark.parametrize("latin, arabic", [
        ("salam", "مرحبا"),
        ("bonjour tout le monde", "واش لاباس"),
        ("ok", "شكرا"),
        ("rendez-vous dyali", "غدا"),
    ])
    def test_concatenated_scripts_are_bi_script(self, latin, arabic):
        for text in (f"{latin} {arabic}", f"{arabic} {latin}", f"{latin}{arabic}"):
            analysis = ScriptAnalyzer().analyze(text)
            assert analysis.latin_ratio > 0.1
            assert analysis.arabic_ratio > 0.1
            assert analysis.is_bi_script is True
