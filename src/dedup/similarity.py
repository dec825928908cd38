"""Description similarity: bigram Dice coefficient and shared-word lookup."""

from __future__ import annotations

MIN_PARTIAL_LENGTH = 4


def _bigrams(s: str) -> set[str]:
    return {s[i:i + 2] for i in range(len(s) - 1)}


def bigram_similarity(a: str | None, b: str | None) -> float:
    """Dice coefficient over character bigrams, in [0, 1].

    Callers are expected to pass normalized descriptions. Strings shorter
    than two characters have no bigrams and score 0 unless identical.
    """
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    bigrams_a = _bigrams(a)
    bigrams_b = _bigrams(b)
    if not bigrams_a or not bigrams_b:
        return 0.0
    shared = len(bigrams_a & bigrams_b)
    return 2.0 * shared / (len(bigrams_a) + len(bigrams_b))


def find_common_words(words_a: set[str], words_b: set[str]) -> list[str]:
    """Return the words two descriptions share, sorted.

    Exact matches win. Only when there are none, fall back to containment
    between words of 4+ characters, which catches merchant names glued to a
    suffix ("garcon" inside "garconfrancais").
    """
    exact = sorted(words_a & words_b)
    if exact:
        return exact

    partial: list[str] = []
    for w1 in sorted(words_a):
        for w2 in sorted(words_b):
            if len(w1) >= MIN_PARTIAL_LENGTH and w1 in w2:
                partial.append(w1)
            elif len(w2) >= MIN_PARTIAL_LENGTH and w2 in w1:
                partial.append(w2)
    return partial
