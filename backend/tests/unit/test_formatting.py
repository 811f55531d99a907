"""
Unit tests for formatting and view revalidation utilities.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from backend.src.utils.formatting import append_note, format_note_date, money, to_naive_utc
from backend.src.utils.revalidation import (
    STAFF_LIST, ViewRevalidator, event_budget, event_staff,
)


class TestFormatting:
    """Tests for formatting helpers."""

    def test_to_naive_utc_converts_aware_values(self):
        aware = datetime(2026, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2026, 5, 1, 12, 0)

    def test_to_naive_utc_keeps_naive_values(self):
        naive = datetime(2026, 5, 1, 12, 0)
        assert to_naive_utc(naive) is naive

    def test_format_note_date(self):
        assert format_note_date(datetime(2026, 6, 1)) == "01/06/2026"

    def test_append_note_to_empty(self):
        assert append_note(None, "Payment cancelled: duplicate") == "Payment cancelled: duplicate"
        assert append_note("", "first") == "first"

    def test_append_note_separates_with_blank_line(self):
        assert append_note("Net 30", "second") == "Net 30\n\nsecond"

    def test_money_quantizes_to_cents(self):
        assert money(0.1) == Decimal("0.10")
        assert money(Decimal("19.999")) == Decimal("20.00")
        assert money(500) == Decimal("500.00")
        assert money(None) is None


class TestViewRevalidator:
    """Tests for invalidation token collection."""

    def test_tokens_are_ordered_and_deduplicated(self):
        revalidator = ViewRevalidator()
        revalidator.revalidate_paths(STAFF_LIST, event_staff("evt_1"), STAFF_LIST, None)
        revalidator.revalidate_path(event_budget("evt_1"))

        assert revalidator.paths == [
            "/people/staff",
            "/events/evt_1/staff",
            "/events/evt_1/budget",
        ]

    def test_drain_resets(self):
        revalidator = ViewRevalidator()
        revalidator.revalidate_path(STAFF_LIST)
        assert revalidator.drain() == [STAFF_LIST]
        assert revalidator.drain() == []
