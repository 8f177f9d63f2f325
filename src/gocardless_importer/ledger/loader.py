#!/usr/bin/env python3
"""
Beancount Ledger Loader

Reads a Beancount ledger and every file it includes, without booking or
validation, so that single-leg transactions written by the importer load
fine. Also answers the questions the importer asks of a ledger:

- find_import_accounts: accounts configured for GoCardless import
- imported_ids: links of transactions imported earlier
- last_imported_date: most recent imported transaction of an account
"""

import glob
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from beancount.core import data
from beancount.parser import parser

logger = logging.getLogger(__name__)

IMPORTER_NAME = "gocardless"
LINK_PREFIX = "id-"


class LedgerError(Exception):
    """Raised when a ledger cannot be read or written."""

    pass


@dataclass
class LedgerFile:
    """One parsed Beancount file."""

    path: Path
    entries: list[data.Directive] = field(default_factory=list)


@dataclass
class Ledger:
    """A root Beancount file plus everything it includes, in load order."""

    root: Path
    files: list[LedgerFile] = field(default_factory=list)

    def entries(self) -> Iterator[data.Directive]:
        for ledger_file in self.files:
            yield from ledger_file.entries

    def transactions(self) -> Iterator[data.Transaction]:
        for entry in self.entries():
            if isinstance(entry, data.Transaction):
                yield entry


@dataclass
class ImportAccount:
    """Ledger account whose open directive carries importer metadata."""

    account: str
    account_id: str
    file: Path


def load_ledger(path: str | Path) -> Ledger:
    """
    Parse a ledger and its includes.

    Args:
        path: Root Beancount file

    Returns:
        Ledger with one LedgerFile per distinct file

    Raises:
        LedgerError: If a file is missing, an include matches nothing, or
                     the parser reports errors
    """
    root = Path(path).expanduser().resolve()
    if not root.is_file():
        raise LedgerError(f"Ledger file not found: {root}")

    ledger = Ledger(root=root)
    _load_file(root, ledger, set())
    logger.debug("Loaded %d ledger file(s) from %s", len(ledger.files), root)
    return ledger


def _load_file(path: Path, ledger: Ledger, seen: set[Path]) -> None:
    if path in seen:
        return
    seen.add(path)

    entries, errors, options_map = parser.parse_file(str(path))
    if errors:
        raise LedgerError(f"Failed to parse {path}: {_format_error(errors[0])}")
    ledger.files.append(LedgerFile(path=path, entries=list(entries)))

    for include in options_map.get("include") or []:
        pattern = Path(include).expanduser()
        if not pattern.is_absolute():
            pattern = path.parent / pattern
        matches = sorted(glob.glob(str(pattern)))
        if not matches:
            raise LedgerError(f"Included file not found: {include} (from {path})")
        for match in matches:
            _load_file(Path(match).resolve(), ledger, seen)


def _format_error(error: object) -> str:
    source = getattr(error, "source", None) or {}
    message = getattr(error, "message", str(error))
    lineno = source.get("lineno") if isinstance(source, dict) else None
    return f"line {lineno}: {message}" if lineno else str(message)


def find_import_accounts(ledger: Ledger, importer: str = IMPORTER_NAME) -> list[ImportAccount]:
    """
    Find accounts configured for import.

    An account qualifies when its open directive has string metadata
    ``importer`` equal to ``importer`` and a string ``account_id``.

    Returns:
        Accounts in file order, then line order
    """
    accounts: list[ImportAccount] = []
    for ledger_file in ledger.files:
        opens = [e for e in ledger_file.entries if isinstance(e, data.Open)]
        for entry in sorted(opens, key=lambda e: e.meta.get("lineno", 0)):
            meta = entry.meta or {}
            if meta.get("importer") != importer:
                continue
            account_id = meta.get("account_id")
            if not isinstance(account_id, str) or not account_id:
                logger.warning("Account %s has importer metadata but no account_id", entry.account)
                continue
            accounts.append(ImportAccount(account=entry.account, account_id=account_id, file=ledger_file.path))
    return accounts


def imported_ids(ledger: Ledger) -> set[str]:
    """Collect every ``id-`` link on any transaction in the ledger."""
    return {link for txn in ledger.transactions() for link in txn.links if link.startswith(LINK_PREFIX)}


def last_imported_date(ledger: Ledger, account: str) -> date | None:
    """
    Date of the most recent imported transaction posting to ``account``.

    Returns:
        The date, or None when nothing was imported for the account yet
    """
    dates = [
        txn.date
        for txn in ledger.transactions()
        if any(link.startswith(LINK_PREFIX) for link in txn.links)
        and any(posting.account == account for posting in txn.postings)
    ]
    return max(dates) if dates else None
