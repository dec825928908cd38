"""5-tier duplicate cascade for one (candidate, reference) pair.

Tiers (evaluated in order for every reference row):
0.   Exact amount, date within 1 day. Description may be worded completely
     differently (TRIP.COM on the statement, "vol Montpellier Orly" in the
     ledger). Does not stop evaluation, so a stronger tier can still win.
1.   Exact amount, date within 2 days, 2+ shared words.
1.5. Exact amount, date within 1 day, 1 shared word or 40% bigram overlap.
     Shown to the user as level 2.
2.   Exact amount, date within 2 days, 1 shared word.
3.   Amount within 10% (fees, rounding), date within 2 days, 1 shared word.

Tiers 1, 1.5 and 2 stop the cascade for the pair once accepted. Picking the
best pair across the whole ledger is the orchestrator's job (engine.py).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterator

from src.dedup.dates import days_between, parse_transaction_date
from src.dedup.models import LedgerTransaction, MatchDetails
from src.dedup.similarity import bigram_similarity, find_common_words
from src.dedup.text import DEFAULT_STOP_WORDS, normalize_description, significant_words

AMOUNT_TOLERANCE = 0.01


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class TransactionFeatures:
    """Per-transaction values reused across every pair it takes part in."""
    transaction: LedgerTransaction
    normalized: str
    words: frozenset[str]
    parsed_date: date | None

    @classmethod
    def of(
        cls,
        txn: LedgerTransaction,
        stop_words: frozenset[str] | set[str] = DEFAULT_STOP_WORDS,
    ) -> TransactionFeatures:
        normalized = normalize_description(txn.description)
        return cls(
            transaction=txn,
            normalized=normalized,
            words=frozenset(significant_words(normalized, stop_words)),
            parsed_date=parse_transaction_date(txn.date),
        )


@dataclass(frozen=True)
class PairSignals:
    """Raw numbers the tier predicates and confidence formulas read."""
    date_diff: int
    amount_diff: float
    amount_diff_percent: float
    common_words: tuple[str, ...]
    similarity: float  # 0-1

    @property
    def common_count(self) -> int:
        return len(self.common_words)

    @property
    def exact_amount(self) -> bool:
        return self.amount_diff <= AMOUNT_TOLERANCE


def compute_signals(
    candidate: TransactionFeatures, reference: TransactionFeatures
) -> PairSignals:
    date_diff = days_between(candidate.parsed_date, reference.parsed_date)

    cand_amount = candidate.transaction.amount
    amount_diff = round(abs(cand_amount - reference.transaction.amount), 2)
    if cand_amount == 0:
        amount_diff_percent = 0.0 if amount_diff == 0 else math.inf
    else:
        amount_diff_percent = amount_diff / abs(cand_amount) * 100

    return PairSignals(
        date_diff=date_diff,
        amount_diff=amount_diff,
        amount_diff_percent=amount_diff_percent,
        common_words=tuple(find_common_words(candidate.words, reference.words)),
        similarity=bigram_similarity(candidate.normalized, reference.normalized),
    )


# ── Classifiers ──────────────────────────────────────────


def classify_date(date_diff: int) -> str:
    if date_diff == 0:
        return "exact"
    if date_diff == 1:
        return "~1 day"
    if date_diff == 2:
        return "~2 days"
    return f"far ({date_diff} days)"


def classify_amount(amount_diff: float, amount_diff_percent: float) -> str:
    if amount_diff <= AMOUNT_TOLERANCE:
        return "exact"
    if math.isinf(amount_diff_percent):
        return "different"
    if amount_diff_percent <= 1:
        return "~1%"
    if amount_diff_percent <= 5:
        return "~5%"
    if amount_diff_percent <= 10:
        return "~10%"
    return f"different ({amount_diff_percent:.0f}%)"


def classify_description(similarity: float, common_count: int) -> str:
    if similarity >= 0.9:
        return "exact"
    if similarity >= 0.7 or common_count >= 3:
        return "very similar"
    if similarity >= 0.5 or common_count >= 2:
        return "similar"
    if common_count >= 1:
        return "approximate"
    return "different"


def build_match_details(signals: PairSignals) -> MatchDetails:
    return MatchDetails(
        date_match=classify_date(signals.date_diff),
        amount_match=classify_amount(signals.amount_diff, signals.amount_diff_percent),
        description_match=classify_description(signals.similarity, signals.common_count),
        date_diff=signals.date_diff,
        amount_diff=signals.amount_diff,
        amount_diff_percent=(
            signals.amount_diff_percent if math.isinf(signals.amount_diff_percent)
            else round(signals.amount_diff_percent, 2)
        ),
        common_words=list(signals.common_words),
        common_words_count=signals.common_count,
        text_similarity=round(signals.similarity * 100),
    )


# ── Tier rules ───────────────────────────────────────────


@dataclass(frozen=True)
class MatchTier:
    tier: float
    applies: Callable[[PairSignals], bool]
    confidence: Callable[[PairSignals], float]
    min_confidence: float = 0
    short_circuit: bool = False

    def evaluate(self, signals: PairSignals) -> float | None:
        """Return the proposed confidence, or None if the tier does not fire."""
        if not self.applies(signals):
            return None
        score = min(self.confidence(signals), 100)
        if score < self.min_confidence:
            return None
        return score


def _tier0_confidence(s: PairSignals) -> float:
    return 88 + min(s.similarity * 10, 7) + min(s.common_count * 2, 5)


def _tier1_confidence(s: PairSignals) -> float:
    return min(95 + s.common_count * 2, 100)


def _tier15_confidence(s: PairSignals) -> float:
    return 90 + min(s.similarity * 10, 5) + min(s.common_count * 2, 5)


def _tier2_confidence(s: PairSignals) -> float:
    return 85 + min(s.common_count * 3, 10) + min(s.similarity * 5, 5)


def _tier3_confidence(s: PairSignals) -> float:
    return round_half_up(
        70
        + (1 - s.amount_diff_percent / 10) * 20
        + (1 - s.date_diff / 2) * 10
        + min(s.common_count * 10, 20)
    )


TIERS: tuple[MatchTier, ...] = (
    MatchTier(
        tier=0,
        applies=lambda s: s.exact_amount and s.date_diff <= 1,
        confidence=_tier0_confidence,
        min_confidence=88,
    ),
    MatchTier(
        tier=1,
        applies=lambda s: s.exact_amount and s.date_diff <= 2 and s.common_count >= 2,
        confidence=_tier1_confidence,
        short_circuit=True,
    ),
    MatchTier(
        tier=1.5,
        applies=lambda s: (
            s.exact_amount and s.date_diff <= 1
            and (s.common_count >= 1 or s.similarity >= 0.4)
        ),
        confidence=_tier15_confidence,
        short_circuit=True,
    ),
    MatchTier(
        tier=2,
        applies=lambda s: s.exact_amount and s.date_diff <= 2 and s.common_count >= 1,
        confidence=_tier2_confidence,
        short_circuit=True,
    ),
    MatchTier(
        tier=3,
        applies=lambda s: (
            s.amount_diff_percent <= 10 and s.date_diff <= 2 and s.common_count >= 1
        ),
        confidence=_tier3_confidence,
        min_confidence=70,
    ),
)


def evaluate_pair(
    signals: PairSignals, tiers: tuple[MatchTier, ...] = TIERS
) -> Iterator[tuple[MatchTier, float]]:
    """Yield (tier, confidence) for every tier that accepts this pair, in order."""
    for rule in tiers:
        score = rule.evaluate(signals)
        if score is None:
            continue
        yield rule, score
        if rule.short_circuit:
            return
