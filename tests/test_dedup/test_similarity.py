"""Tests for bigram similarity and the common-word finder."""

import pytest

from src.dedup.similarity import bigram_similarity, find_common_words


class TestBigramSimilarity:
    def test_identical(self):
        assert bigram_similarity("phytonut", "phytonut") == 1.0

    def test_identical_single_char(self):
        assert bigram_similarity("a", "a") == 1.0

    def test_empty(self):
        assert bigram_similarity("", "phytonut") == 0.0
        assert bigram_similarity("phytonut", "") == 0.0
        assert bigram_similarity(None, None) == 0.0

    def test_too_short_for_bigrams(self):
        assert bigram_similarity("a", "b") == 0.0
        assert bigram_similarity("a", "ab") == 0.0

    def test_dice_coefficient(self):
        # ni ig gh ht / na ac ch ht: one shared bigram out of 4 + 4
        assert bigram_similarity("night", "nacht") == pytest.approx(0.25)

    def test_partial_overlap(self):
        # 7 shared bigrams out of 11 + 11
        score = bigram_similarity("hpy phytonut", "phytonut sas")
        assert score == pytest.approx(14 / 22)

    def test_no_overlap(self):
        assert bigram_similarity("trip com", "vol montpellier orly") == 0.0

    @pytest.mark.parametrize("a,b", [
        ("hpy phytonut", "phytonut sas"),
        ("garcon francais", "garconfrancais com"),
        ("night", "nacht"),
        ("a", "ab"),
        ("amazon marketplace", "amazon eu"),
    ])
    def test_symmetric_and_bounded(self, a, b):
        score = bigram_similarity(a, b)
        assert score == bigram_similarity(b, a)
        assert 0.0 <= score <= 1.0


class TestFindCommonWords:
    def test_exact_intersection(self):
        assert find_common_words({"hpy", "phytonut"}, {"phytonut", "sas"}) == ["phytonut"]

    def test_exact_sorted(self):
        result = find_common_words({"uber", "eats", "paris"}, {"paris", "uber"})
        assert result == ["paris", "uber"]

    def test_partial_containment(self):
        result = find_common_words({"garcon", "francais"}, {"garconfrancais", "com"})
        assert result == ["francais", "garcon"]

    def test_partial_reverse_containment(self):
        assert find_common_words({"garconfrancais"}, {"garcon"}) == ["garcon"]

    def test_exact_takes_priority_over_partial(self):
        result = find_common_words({"amazon", "prime"}, {"amazon", "primevideo"})
        assert result == ["amazon"]

    def test_short_words_never_partial(self):
        assert find_common_words({"com"}, {"comptoir"}) == []

    def test_no_match(self):
        assert find_common_words({"trip", "com"}, {"vol", "montpellier", "orly"}) == []

    def test_empty(self):
        assert find_common_words(set(), {"phytonut"}) == []
        assert find_common_words(set(), set()) == []
