"""
Formatting utilities shared by schemas and services.

Provides functions for:
- Normalizing incoming datetimes to naive UTC (the storage convention)
- Rendering dates inside human-readable notes
- Appending lines to free-form note fields
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime to naive UTC.

    All timestamps are stored naive in UTC (as produced by
    ``datetime.utcnow``). Aware inputs are converted, naive inputs are
    assumed to already be UTC.

    Examples:
        >>> to_naive_utc(datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc))
        datetime.datetime(2026, 5, 1, 12, 0)
        >>> to_naive_utc(None) is None
        True
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_note_date(value: datetime) -> str:
    """Render a date the way it appears in payment notes (dd/mm/YYYY)."""
    return value.strftime("%d/%m/%Y")


def append_note(existing: Optional[str], line: str) -> str:
    """
    Append a line to a notes field, separated by a blank line.

    Examples:
        >>> append_note(None, "Payment cancelled: duplicate")
        'Payment cancelled: duplicate'
        >>> append_note("Net 30", "Postponed to 01/06/2026: cash flow")
        'Net 30\\n\\nPostponed to 01/06/2026: cash flow'
    """
    return f"{existing or ''}\n\n{line}".strip()


def money(value) -> Optional[Decimal]:
    """
    Coerce a numeric value to a two-decimal Decimal (None stays None).

    Floats go through ``str`` so 0.1 becomes Decimal("0.10"), not its
    binary expansion.
    """
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal("0.01"))
