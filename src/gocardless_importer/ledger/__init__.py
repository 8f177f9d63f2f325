"""
Ledger Package

Beancount ledger access for the importer.

This package provides:
- Loading of a ledger and all of its includes
- Discovery of accounts configured with importer metadata
- Conversion of bank transactions to Beancount transactions
- Duplicate detection and append-only writing
"""

from .converter import ConversionError, make_link, narration, to_beancount
from .loader import (
    IMPORTER_NAME,
    LINK_PREFIX,
    ImportAccount,
    Ledger,
    LedgerError,
    LedgerFile,
    find_import_accounts,
    imported_ids,
    last_imported_date,
    load_ledger,
)
from .writer import append_entries, is_duplicate, order_entries, render_entries

__all__ = [
    # Loading
    "IMPORTER_NAME",
    "LINK_PREFIX",
    "ImportAccount",
    "Ledger",
    "LedgerError",
    "LedgerFile",
    "find_import_accounts",
    "imported_ids",
    "last_imported_date",
    "load_ledger",
    # Conversion
    "ConversionError",
    "make_link",
    "narration",
    "to_beancount",
    # Writing
    "append_entries",
    "is_duplicate",
    "order_entries",
    "render_entries",
]
