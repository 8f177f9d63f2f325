#!/usr/bin/env python3
"""
Ledger Writer

Renders Beancount entries and appends them to a ledger file. Existing text
is never rewritten.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from beancount.core import data
from beancount.parser import printer

from .loader import LedgerError

logger = logging.getLogger(__name__)


def is_duplicate(entry: data.Directive, ids: set[str]) -> bool:
    """True when the entry is a transaction carrying a link already in ``ids``."""
    if not isinstance(entry, data.Transaction):
        return False
    return any(link in ids for link in entry.links)


def order_entries(entries: Iterable[data.Transaction]) -> list[data.Transaction]:
    """
    Order entries oldest first.

    The API lists transactions newest first, so the list is reversed before
    a stable sort by date to keep same-day transactions in bank order.
    """
    return sorted(reversed(list(entries)), key=lambda entry: entry.date)


def render_entries(entries: Iterable[data.Directive]) -> str:
    """Render entries in Beancount syntax, separated by blank lines."""
    return "\n".join(printer.format_entry(entry) for entry in entries)


def append_entries(path: Path, entries: list[data.Directive]) -> str:
    """
    Append entries to the end of ``path``.

    Returns:
        The text that was appended (empty when there was nothing to write)

    Raises:
        LedgerError: If the file cannot be read or written
    """
    if not entries:
        return ""

    text = render_entries(entries)
    try:
        existing = path.read_text(encoding="utf-8")
        if not existing:
            separator = ""
        elif existing.endswith("\n"):
            separator = "\n"
        else:
            separator = "\n\n"
        with open(path, "a", encoding="utf-8") as f:
            f.write(separator + text)
    except OSError as e:
        raise LedgerError(f"Failed to append to {path}: {e}") from e

    logger.info("Appended %d entries to %s", len(entries), path)
    return separator + text
