"""Transaction date parsing.

Statements and the ledger sheet do not agree on a date format. ISO dates
come from parsers, DD/MM/YYYY from French bank exports and hand entry.
"""

from __future__ import annotations

from datetime import date, datetime

# Day difference used when either side has no usable date. Large enough that
# no tier can fire on date proximity.
UNKNOWN_DATE_DIFF = 999

_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y%m%d",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def parse_transaction_date(value: str | date | None) -> date | None:
    """Parse YYYY-MM-DD, DD/MM/YYYY or a handful of common layouts.

    Returns None if the value is empty or matches no known format.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            pass

    # ISO timestamps ("2025-11-30T10:15:00Z", "2025-11-30 10:15")
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def days_between(a: str | date | None, b: str | date | None) -> int:
    """Absolute whole-day difference, or UNKNOWN_DATE_DIFF if unparseable."""
    da = parse_transaction_date(a)
    db = parse_transaction_date(b)
    if da is None or db is None:
        return UNKNOWN_DATE_DIFF
    return abs((da - db).days)
