"""Loading candidate batches and reference ledgers from JSON exports.

Both files hold either a bare list of transaction objects or an object with
the list under ``transactions`` (import screen) or ``rows`` (ledger sheet
``list`` action).
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

from src.dedup.dates import parse_transaction_date
from src.dedup.models import DEFAULT_DESCRIPTION_FIELDS, LedgerTransaction

logger = logging.getLogger(__name__)


def _extract_rows(data: object, path: Path) -> list[dict]:
    if isinstance(data, dict):
        for key in ("transactions", "rows"):
            if isinstance(data.get(key), list):
                data = data[key]
                break
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of transactions in {path}")
    rows = [row for row in data if isinstance(row, dict)]
    if len(rows) != len(data):
        logger.warning("Skipped %d non-object entries in %s", len(data) - len(rows), path)
    return rows


def load_transactions(
    path: Path | str,
    description_fields: tuple[str, ...] | list[str] = DEFAULT_DESCRIPTION_FIELDS,
) -> list[LedgerTransaction]:
    """Load a candidate batch.

    Raises FileNotFoundError if the file is missing and ValueError if it is
    not valid JSON or holds invalid amounts.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Transactions file not found: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    rows = _extract_rows(data, path)
    return [LedgerTransaction.from_dict(row, description_fields) for row in rows]


def load_reference_ledger(
    path: Path | str,
    description_fields: tuple[str, ...] | list[str] = DEFAULT_DESCRIPTION_FIELDS,
) -> list[LedgerTransaction]:
    """Load the reference ledger, or an empty list if it cannot be read.

    A missing ledger must not block an import: the check then runs against
    nothing and flags no duplicates.
    """
    try:
        return load_transactions(path, description_fields)
    except (OSError, ValueError) as e:
        logger.warning("Reference ledger unavailable, checking against nothing: %s", e)
        return []


def most_recent(
    transactions: list[LedgerTransaction], limit: int
) -> list[LedgerTransaction]:
    """Keep the ``limit`` latest transactions, newest first.

    Rows without a parseable date sort last; equal dates keep file order.
    """
    if limit <= 0:
        return []

    def sort_key(item: tuple[int, LedgerTransaction]) -> tuple[bool, int, int]:
        index, txn = item
        parsed = parse_transaction_date(txn.date)
        ordinal = parsed.toordinal() if parsed else date.min.toordinal()
        return (parsed is None, -ordinal, index)

    ordered = sorted(enumerate(transactions), key=sort_key)
    return [txn for _, txn in ordered[:limit]]
