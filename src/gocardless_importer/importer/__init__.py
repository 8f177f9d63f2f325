"""
Importer Package

Orchestrates a ledger import: configured accounts are read from the ledger,
their transactions fetched from GoCardless, deduplicated and appended.
"""

from .orchestrator import AccountImportResult, ImportResult, import_ledger

__all__ = [
    "AccountImportResult",
    "ImportResult",
    "import_ledger",
]
