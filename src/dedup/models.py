"""Dataclasses passed through the duplicate checker.

Inputs arrive as plain dicts (from the import pipeline or the ledger sheet)
and leave as plain dicts with camelCase keys, which is what the import
screen reads. Everything in between uses these dataclasses.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

DEFAULT_DESCRIPTION_FIELDS: tuple[str, ...] = ("description",)

# Tier id → level shown to the user. Tier 0 and 1.5 share the level 2 badge.
DISPLAY_LEVELS: dict[float, int] = {0: 2, 1: 1, 1.5: 2, 2: 2, 3: 3}


@dataclass(frozen=True)
class LedgerTransaction:
    """A candidate from an import batch, or a reference row from the ledger."""
    date: str
    description: str
    amount: float
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        description_fields: tuple[str, ...] | list[str] = DEFAULT_DESCRIPTION_FIELDS,
    ) -> LedgerTransaction:
        """Build from a wire dict, keeping every original field in ``raw``.

        The description is the first non-empty value among
        ``description_fields``. A missing amount is read as 0.

        Raises ValueError if the amount is not numeric.
        """
        description = ""
        for name in description_fields:
            value = data.get(name)
            if value:
                description = str(value)
                break

        amount = data.get("amount")
        if amount is None or amount == "":
            amount = 0.0
        try:
            amount = float(amount)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid amount {data.get('amount')!r}") from e

        date = data.get("date")
        return cls(
            date="" if date is None else str(date),
            description=description,
            amount=amount,
            raw=dict(data),
        )

    def to_dict(self) -> dict[str, Any]:
        out = dict(self.raw)
        out.setdefault("date", self.date)
        out.setdefault("description", self.description)
        out.setdefault("amount", self.amount)
        return out


@dataclass
class MatchDetails:
    """Why two transactions were compared the way they were."""
    date_match: str
    amount_match: str
    description_match: str
    date_diff: int
    amount_diff: float
    amount_diff_percent: float
    common_words: list[str]
    common_words_count: int
    text_similarity: float  # 0-100

    def to_dict(self) -> dict[str, Any]:
        return {
            "dateMatch": self.date_match,
            "amountMatch": self.amount_match,
            "descriptionMatch": self.description_match,
            "dateDiff": self.date_diff,
            "amountDiff": self.amount_diff,
            "amountDiffPercent": (
                None if math.isinf(self.amount_diff_percent)
                else self.amount_diff_percent
            ),
            "commonWords": list(self.common_words),
            "commonWordsCount": self.common_words_count,
            "textSimilarity": self.text_similarity,
        }


@dataclass
class MatchResult:
    """Best reference row found for one candidate."""
    duplicate: LedgerTransaction
    tier: float  # 0, 1, 1.5, 2 or 3
    confidence: int  # 0-100
    match_details: MatchDetails

    @property
    def level(self) -> int:
        return DISPLAY_LEVELS[self.tier]


@dataclass
class AnnotatedTransaction:
    """A candidate plus the outcome of the duplicate check."""
    transaction: LedgerTransaction
    match: MatchResult | None = None
    note: str | None = None

    @property
    def is_duplicate(self) -> bool:
        return self.match is not None

    @property
    def duplicate_level(self) -> int | None:
        return self.match.level if self.match else None

    @property
    def duplicate_confidence(self) -> int | None:
        return self.match.confidence if self.match else None

    def to_dict(self) -> dict[str, Any]:
        out = self.transaction.to_dict()
        match = self.match
        out.update({
            "isDuplicate": match is not None,
            "duplicateLevel": match.level if match else None,
            "duplicateConfidence": match.confidence if match else None,
            "matchDetails": match.match_details.to_dict() if match else None,
            "duplicateNote": self.note,
            "matchedTransaction": match.duplicate.to_dict() if match else None,
        })
        return out
