#!/usr/bin/env python3
"""
Ledger Import Orchestration

Runs a complete import: reads the ledger configuration, fetches booked
transactions per configured account, drops the ones already in the ledger
and appends the rest to the file that opens the account.

Accounts are processed sequentially. All accounts are fetched and converted
before the first byte is written, so a failing account leaves every file
untouched.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from beancount.core import data

from ..gocardless.client import GoCardlessClient
from ..ledger.converter import to_beancount
from ..ledger.loader import ImportAccount, find_import_accounts, imported_ids, last_imported_date, load_ledger
from ..ledger.writer import append_entries, is_duplicate, order_entries, render_entries

logger = logging.getLogger(__name__)


@dataclass
class AccountImportResult:
    """Outcome of importing one ledger account."""

    account: str
    account_id: str
    file: Path
    date_from: date | None = None
    fetched: int = 0
    duplicates: int = 0
    entries: list[data.Transaction] = field(default_factory=list)
    text: str = ""

    @property
    def imported(self) -> int:
        return len(self.entries)


@dataclass
class ImportResult:
    """Outcome of a whole ledger import."""

    ledger_path: Path
    dry_run: bool = False
    accounts: list[AccountImportResult] = field(default_factory=list)

    @property
    def total_fetched(self) -> int:
        return sum(a.fetched for a in self.accounts)

    @property
    def total_imported(self) -> int:
        return sum(a.imported for a in self.accounts)

    @property
    def total_duplicates(self) -> int:
        return sum(a.duplicates for a in self.accounts)


def import_ledger(
    ledger_path: str | Path,
    client: GoCardlessClient,
    *,
    dry_run: bool = False,
    since: date | None = None,
    progress: Callable[[str], None] | None = None,
) -> ImportResult:
    """
    Import new bank transactions into a Beancount ledger.

    Args:
        ledger_path: Root Beancount file
        client: Authenticated GoCardless client
        dry_run: Render the new entries without writing them
        since: Fetch transactions from this date for every account instead
               of each account's last imported date
        progress: Optional callback receiving one line per fetched account

    Returns:
        ImportResult with per-account counts and the new entries

    Raises:
        LedgerError: If the ledger cannot be read, a transaction cannot be
                     converted, or a file cannot be written
        GoCardlessError: If an API call fails
    """
    ledger = load_ledger(ledger_path)
    known_ids = imported_ids(ledger)
    accounts = find_import_accounts(ledger)
    result = ImportResult(ledger_path=ledger.root, dry_run=dry_run)

    if not accounts:
        logger.warning("No accounts with importer metadata found in %s", ledger.root)
        return result

    for import_account in accounts:
        date_from = since or last_imported_date(ledger, import_account.account)
        account_result = _collect_account(client, import_account, known_ids, date_from, progress)
        result.accounts.append(account_result)

    for account_result in result.accounts:
        if dry_run:
            account_result.text = render_entries(account_result.entries)
        else:
            account_result.text = append_entries(account_result.file, account_result.entries)

    logger.info(
        "Import finished: %d fetched, %d new, %d duplicates%s",
        result.total_fetched,
        result.total_imported,
        result.total_duplicates,
        " (dry run)" if dry_run else "",
    )
    return result


def _collect_account(
    client: GoCardlessClient,
    import_account: ImportAccount,
    known_ids: set[str],
    date_from: date | None,
    progress: Callable[[str], None] | None,
) -> AccountImportResult:
    message = f"Retrieving transactions for {import_account.account} ..."
    logger.info(message)
    if progress is not None:
        progress(message)

    transactions = client.list_transactions(import_account.account_id, date_from=date_from)
    account_result = AccountImportResult(
        account=import_account.account,
        account_id=import_account.account_id,
        file=import_account.file,
        date_from=date_from,
        fetched=len(transactions.booked),
    )

    new_entries: list[data.Transaction] = []
    for transaction in transactions.booked:
        entry = to_beancount(transaction, import_account.account)
        if is_duplicate(entry, known_ids):
            account_result.duplicates += 1
            continue
        if not entry.links:
            logger.warning(
                "Transaction on %s for %s %s has no id and cannot be deduplicated",
                entry.date,
                transaction.amount,
                transaction.currency,
            )
        # Repeats within the same response count as duplicates too
        known_ids.update(entry.links)
        new_entries.append(entry)

    account_result.entries = order_entries(new_entries)
    logger.debug(
        "%s: %d fetched, %d new, %d duplicates",
        import_account.account,
        account_result.fetched,
        account_result.imported,
        account_result.duplicates,
    )
    return account_result
