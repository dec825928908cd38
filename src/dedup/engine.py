"""Batch duplicate check of imported transactions against the ledger.

Each candidate is compared with every reference row. Every tier that fires
for a pair proposes a confidence; the single highest proposal across the
whole ledger wins. Ties keep the proposal found first (ledger order, then
tier order), so results are stable for a given ledger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import reduce
from typing import Iterable, Iterator

from src.dedup.models import (
    DISPLAY_LEVELS,
    AnnotatedTransaction,
    LedgerTransaction,
    MatchResult,
)
from src.dedup.text import DEFAULT_STOP_WORDS
from src.dedup.tiers import (
    TIERS,
    MatchTier,
    PairSignals,
    TransactionFeatures,
    build_match_details,
    compute_signals,
    evaluate_pair,
    round_half_up,
)

logger = logging.getLogger(__name__)

LEVEL_LABELS: dict[int, tuple[str, str]] = {
    1: ("🔴", "Certain duplicate"),
    2: ("🟠", "Probable duplicate"),
    3: ("🟡", "Possible duplicate"),
}


@dataclass(frozen=True)
class _Proposal:
    reference: LedgerTransaction
    tier: MatchTier
    score: float
    signals: PairSignals


@dataclass
class BatchResult:
    """Annotated candidates plus duplicate counts per display level."""
    transactions: list[AnnotatedTransaction]
    duplicate_counts: dict[int, int] = field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0}
    )

    @property
    def duplicate_count(self) -> int:
        return sum(self.duplicate_counts.values())

    def to_dict(self) -> dict:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "duplicateCounts": {
                str(level): n for level, n in sorted(self.duplicate_counts.items())
            },
        }


def keep_best(best: _Proposal | None, proposal: _Proposal) -> _Proposal:
    """Fold step: a proposal replaces the current best only if strictly greater."""
    if best is None or proposal.score > best.score:
        return proposal
    return best


def format_note(match: MatchResult) -> str:
    """Human-readable explanation shown next to a flagged import row."""
    icon, label = LEVEL_LABELS[match.level]
    ref = match.duplicate
    details = match.match_details
    return (
        f"{icon} {label} ({match.confidence}%): "
        f"{ref.date} \"{ref.description}\" {ref.amount:.2f} "
        f"[date {details.date_match}, amount {details.amount_match}, "
        f"description {details.description_match}]"
    )


class DuplicateChecker:
    """Flag imported transactions that are probably already in the ledger."""

    def __init__(
        self,
        stop_words: frozenset[str] | set[str] | None = None,
        tiers: tuple[MatchTier, ...] = TIERS,
    ):
        self.stop_words = frozenset(
            DEFAULT_STOP_WORDS if stop_words is None else stop_words
        )
        self.tiers = tiers

    def features(self, txn: LedgerTransaction) -> TransactionFeatures:
        return TransactionFeatures.of(txn, self.stop_words)

    def _proposals(
        self,
        candidate: TransactionFeatures,
        references: Iterable[TransactionFeatures],
    ) -> Iterator[_Proposal]:
        for ref in references:
            signals = compute_signals(candidate, ref)
            for tier, score in evaluate_pair(signals, self.tiers):
                yield _Proposal(ref.transaction, tier, score, signals)

    def find_best_match(
        self,
        candidate: LedgerTransaction | TransactionFeatures,
        references: Iterable[LedgerTransaction | TransactionFeatures],
    ) -> MatchResult | None:
        """Return the highest-confidence match across all references, or None."""
        if isinstance(candidate, LedgerTransaction):
            candidate = self.features(candidate)
        refs = (
            r if isinstance(r, TransactionFeatures) else self.features(r)
            for r in references
        )
        best = reduce(keep_best, self._proposals(candidate, refs), None)
        if best is None:
            return None
        return MatchResult(
            duplicate=best.reference,
            tier=best.tier.tier,
            confidence=round_half_up(best.score),
            match_details=build_match_details(best.signals),
        )

    def annotate(
        self,
        candidate: LedgerTransaction,
        references: list[TransactionFeatures],
    ) -> AnnotatedTransaction:
        match = self.find_best_match(candidate, references)
        if match is None:
            logger.debug(
                "No duplicate: %s %.2f '%s'",
                candidate.date, candidate.amount, candidate.description,
            )
            return AnnotatedTransaction(transaction=candidate)

        logger.debug(
            "Duplicate (tier %s, %d%%): %s %.2f '%s' ~ %s %.2f '%s'",
            match.tier, match.confidence,
            candidate.date, candidate.amount, candidate.description,
            match.duplicate.date, match.duplicate.amount, match.duplicate.description,
        )
        return AnnotatedTransaction(
            transaction=candidate, match=match, note=format_note(match),
        )

    def check_batch(
        self,
        candidates: list[LedgerTransaction],
        references: list[LedgerTransaction],
    ) -> BatchResult:
        """Annotate every candidate. The reference list is never modified."""
        counts = {level: 0 for level in sorted(set(DISPLAY_LEVELS.values()))}

        if not references:
            logger.info(
                "No reference transactions, nothing to check (%d candidates)",
                len(candidates),
            )
            return BatchResult(
                transactions=[AnnotatedTransaction(transaction=c) for c in candidates],
                duplicate_counts=counts,
            )

        ref_features = [self.features(r) for r in references]
        annotated: list[AnnotatedTransaction] = []
        for candidate in candidates:
            result = self.annotate(candidate, ref_features)
            if result.match is not None:
                counts[result.match.level] += 1
            annotated.append(result)

        logger.info(
            "Checked %d candidates against %d references: %d duplicates "
            "(level 1=%d, level 2=%d, level 3=%d)",
            len(candidates), len(references), sum(counts.values()),
            counts[1], counts[2], counts[3],
        )
        return BatchResult(transactions=annotated, duplicate_counts=counts)
