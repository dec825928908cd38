"""Tests for description normalization and significant-word extraction."""

from src.dedup.text import DEFAULT_STOP_WORDS, normalize_description, significant_words


class TestNormalizeDescription:
    def test_lowercases_and_splits_decorators(self):
        assert normalize_description("HPY*PHYTONUT") == "hpy phytonut"

    def test_strips_diacritics(self):
        assert normalize_description("Café Crème") == "cafe creme"
        assert normalize_description("Été à Paris!!") == "ete a paris"

    def test_strips_reference_numbers(self):
        assert normalize_description("VIR SEPA 1234567 LOYER") == "vir sepa loyer"

    def test_keeps_short_numbers(self):
        assert normalize_description("CB 12345 MONOP") == "cb 12345 monop"

    def test_punctuation_becomes_space(self):
        assert normalize_description("  garconfrancais.com  ") == "garconfrancais com"
        assert normalize_description("TRIP.COM") == "trip com"

    def test_collapses_whitespace(self):
        assert normalize_description("PHILZ   COFFEE\t SF") == "philz coffee sf"

    def test_empty_and_none(self):
        assert normalize_description("") == ""
        assert normalize_description(None) == ""

    def test_idempotent(self):
        samples = [
            "HPY*PHYTONUT 4412983",
            "Café Crème - Paris 11ème",
            "123.456789/00",
            "garconfrancais.com",
            "PRLV SEPA EDF  n°0012345678",
            "   ",
        ]
        for s in samples:
            once = normalize_description(s)
            assert normalize_description(once) == once


class TestSignificantWords:
    def test_basic(self):
        assert significant_words("vol montpellier orly") == {"vol", "montpellier", "orly"}

    def test_drops_french_stop_words(self):
        assert significant_words("achat pour les enfants") == {"achat", "enfants"}

    def test_drops_english_stop_words(self):
        assert significant_words("the and shop") == {"shop"}

    def test_drops_numbers_and_short_words(self):
        assert significant_words("cb 12345 monop") == {"monop"}

    def test_returns_set_without_duplicates(self):
        assert significant_words("uber uber eats") == {"uber", "eats"}

    def test_custom_stop_words(self):
        words = significant_words("carte monoprix paris", stop_words={"carte"})
        assert words == {"monoprix", "paris"}

    def test_custom_stop_words_replace_defaults(self):
        assert "the" in DEFAULT_STOP_WORDS
        assert significant_words("the shop", stop_words=set()) == {"the", "shop"}

    def test_empty_and_none(self):
        assert significant_words("") == set()
        assert significant_words(None) == set()
