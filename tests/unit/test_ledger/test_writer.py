#!/usr/bin/env python3
"""Tests for duplicate detection, ordering and append-only writing."""

from datetime import date
from decimal import Decimal

import pytest
from beancount.core import data
from beancount.parser import parser

from gocardless_importer.gocardless.models import BankTransaction
from gocardless_importer.ledger.converter import to_beancount
from gocardless_importer.ledger.writer import append_entries, is_duplicate, order_entries, render_entries
from tests.fixtures.gocardless_data import SAMPLE_LEDGER, make_transaction


def entry(internal_id: str | None, booking_date: str, amount: str = "-1.00", text: str = "Payment"):
    return to_beancount(
        BankTransaction.from_dict(make_transaction(internal_id, booking_date, amount, text)),
        "Assets:Bank:Checking",
    )


class TestIsDuplicate:
    """Test duplicate detection by link."""

    @pytest.mark.ledger
    def test_known_link_is_duplicate(self):
        """Test an entry whose link is known is a duplicate."""
        assert is_duplicate(entry("abc", "2024-02-01"), {"id-abc"})

    @pytest.mark.ledger
    def test_unknown_link_is_new(self):
        """Test an entry with an unseen link is new."""
        assert not is_duplicate(entry("abc", "2024-02-01"), {"id-other"})

    @pytest.mark.ledger
    def test_entry_without_links_is_new(self):
        """Test entries without ids are never duplicates."""
        assert not is_duplicate(entry(None, "2024-02-01"), {"id-abc"})

    @pytest.mark.ledger
    def test_non_transactions_are_not_duplicates(self):
        """Test other directives are ignored."""
        open_entry = data.Open(data.new_metadata("<test>", 0), date(2024, 1, 1), "Assets:Bank", None, None)

        assert not is_duplicate(open_entry, {"id-abc"})


class TestOrderEntries:
    """Test oldest-first ordering."""

    @pytest.mark.ledger
    def test_newest_first_input_becomes_oldest_first(self):
        """Test dates ascend and same-day entries keep bank order."""
        # API order: newest first, and within a day the later booking first
        entries = [
            entry("c", "2024-02-03"),
            entry("b2", "2024-02-02"),
            entry("b1", "2024-02-02"),
            entry("a", "2024-02-01"),
        ]

        ordered = order_entries(entries)

        assert [next(iter(e.links)) for e in ordered] == ["id-a", "id-b1", "id-b2", "id-c"]


class TestRenderAndAppend:
    """Test rendering and appending to ledger files."""

    @pytest.mark.ledger
    def test_rendered_text_parses_back(self):
        """Test rendered entries are valid Beancount with the same content."""
        text = render_entries([entry("abc", "2024-02-01", "-12.50", "Coffee"), entry("def", "2024-02-02")])

        parsed, errors, _ = parser.parse_string(text)

        assert errors == []
        assert [e.date for e in parsed] == [date(2024, 2, 1), date(2024, 2, 2)]
        assert parsed[0].narration == "Coffee"
        assert parsed[0].links == frozenset({"id-abc"})
        assert parsed[0].postings[0].units.number == Decimal("-12.50")
        assert "\n\n" in text

    @pytest.mark.ledger
    def test_append_keeps_existing_text(self, sample_ledger):
        """Test the original content stays byte-for-byte in place."""
        appended = append_entries(sample_ledger, [entry("new-1", "2024-02-10", "-3.00", "Bakery")])

        content = sample_ledger.read_text()
        assert content.startswith(SAMPLE_LEDGER)
        assert content == SAMPLE_LEDGER + appended
        assert appended.startswith("\n")
        assert "^id-new-1" in appended

        _, errors, _ = parser.parse_string(content)
        assert errors == []

    @pytest.mark.ledger
    def test_append_to_file_without_trailing_newline(self, temp_dir):
        """Test a blank line is inserted after an unterminated last line."""
        path = temp_dir / "main.beancount"
        path.write_text("2024-01-01 open Assets:Bank:Checking EUR")

        append_entries(path, [entry("new-1", "2024-02-10")])

        content = path.read_text()
        assert content.startswith("2024-01-01 open Assets:Bank:Checking EUR\n\n2024-02-10 *")

    @pytest.mark.ledger
    def test_append_nothing_leaves_file_untouched(self, sample_ledger):
        """Test an empty entry list does not modify the file."""
        before = sample_ledger.stat().st_mtime_ns

        assert append_entries(sample_ledger, []) == ""
        assert sample_ledger.read_text() == SAMPLE_LEDGER
        assert sample_ledger.stat().st_mtime_ns == before
