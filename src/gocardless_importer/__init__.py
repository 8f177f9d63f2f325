"""
Beancount GoCardless Importer

Imports bank transactions from the GoCardless Bank Account Data API into a
plain-text Beancount ledger.

Domain Packages:
- core: Configuration and shared serialization helpers
- gocardless: API client, response models and token storage
- ledger: Beancount ledger reading, conversion and appending
- importer: Orchestration of a full ledger import
- cli: Command-line interface

Example Usage:
    from gocardless_importer.gocardless import GoCardlessClient
    from gocardless_importer.importer import import_ledger

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "beancount-gocardless-importer contributors"

from .core.config import Environment, get_config
from .gocardless import GoCardlessClient, GoCardlessError
from .importer import ImportResult, import_ledger
from .ledger import LedgerError

__all__ = [
    # Configuration
    "Environment",
    "get_config",
    # API client
    "GoCardlessClient",
    "GoCardlessError",
    # Import
    "ImportResult",
    "import_ledger",
    "LedgerError",
]
