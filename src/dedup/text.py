"""Description normalization and significant-word extraction.

Bank labels and hand-typed ledger descriptions rarely agree on wording:
"HPY*PHYTONUT 4412983" on a statement is "Phytonut SAS" in the sheet.
Both sides go through the same normalization before any comparison.
"""

from __future__ import annotations

import re
import unicodedata

# Articles, conjunctions and common prepositions (French + English).
DEFAULT_STOP_WORDS: frozenset[str] = frozenset({
    # French
    "les", "des", "une", "aux", "par", "pour", "sur", "dans", "avec", "sans",
    "sous", "chez", "entre", "vers", "que", "qui", "est", "son", "ses", "leur",
    "leurs", "mon", "mes", "ton", "tes", "nos", "vos", "ces", "cet", "cette",
    "mais", "donc", "car", "puis", "comme", "pas", "plus", "tout", "tous",
    "via", "depuis", "apres", "avant", "pendant",
    # English
    "the", "and", "for", "with", "from", "into", "onto", "over", "under",
    "but", "nor", "yet", "not", "are", "was", "were", "this", "that", "these",
    "those", "its", "our", "your", "their", "his", "her", "you", "off", "out",
    "per", "about", "after", "before", "between", "through", "during",
})

MIN_WORD_LENGTH = 3

_LONG_DIGIT_RUN = re.compile(r"\d{6,}")
_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_description(desc: str | None) -> str:
    """Normalize a transaction description for matching.

    - Lowercase
    - Strip diacritics (NFD decomposition, combining marks dropped)
    - Strip reference numbers (6+ digits)
    - Replace punctuation with spaces
    - Collapse whitespace
    """
    if not desc:
        return ""
    desc = desc.lower()
    desc = unicodedata.normalize("NFD", desc)
    desc = "".join(ch for ch in desc if not unicodedata.combining(ch))
    desc = _LONG_DIGIT_RUN.sub("", desc)
    desc = _NON_WORD.sub(" ", desc)
    desc = _WHITESPACE.sub(" ", desc)
    return desc.strip()


def significant_words(
    normalized: str | None,
    stop_words: frozenset[str] | set[str] = DEFAULT_STOP_WORDS,
) -> set[str]:
    """Return the set of words worth comparing in a normalized description.

    Drops words shorter than 3 characters, stop-words and pure numbers.
    """
    if not normalized:
        return set()
    return {
        word for word in normalized.split()
        if len(word) >= MIN_WORD_LENGTH
        and word not in stop_words
        and not word.isdigit()
    }
