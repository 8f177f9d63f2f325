#!/usr/bin/env python3
"""
Bank Transaction to Beancount Conversion

Turns a GoCardless transaction into a single-posting Beancount transaction.
The counter-posting is left to the user; the link ``^id-<bank id>`` marks the
entry as imported so later runs skip it.
"""

import re
from datetime import date, datetime

from beancount.core import data, flags
from beancount.core.amount import Amount

from ..gocardless.models import BankTransaction
from .loader import LINK_PREFIX, LedgerError

SOURCE_FILENAME = "<gocardless>"

_INVALID_LINK_CHARS = re.compile(r"[^A-Za-z0-9\-_/.]")


class ConversionError(LedgerError):
    """Raised when a bank transaction cannot be expressed in Beancount."""

    pass


def make_link(external_id: str) -> str:
    """Build the import link for a bank transaction id."""
    return LINK_PREFIX + _INVALID_LINK_CHARS.sub("-", external_id)


def narration(transaction: BankTransaction) -> str | None:
    """
    Pick the narration: the remittance lines joined with ", ", else the
    unstructured remittance text, else the creditor name.
    """
    if transaction.remittance_information_unstructured_array:
        return ", ".join(transaction.remittance_information_unstructured_array)
    if transaction.remittance_information_unstructured is not None:
        return transaction.remittance_information_unstructured
    return transaction.creditor_name


def booking_date(transaction: BankTransaction) -> date:
    if not transaction.booking_date:
        raise ConversionError("booking date is missing")
    try:
        return datetime.strptime(transaction.booking_date[:10], "%Y-%m-%d").date()
    except ValueError as e:
        raise ConversionError(f"invalid booking date: {transaction.booking_date!r}") from e


def metadata(transaction: BankTransaction) -> dict[str, str]:
    """Bank details worth keeping on the entry, only those present."""
    exchange = transaction.currency_exchange
    candidates = [
        ("booking_date_time", transaction.booking_date_time),
        ("value_date_time", transaction.value_date_time),
        ("from_name", transaction.debtor_name),
        ("from_iban", transaction.debtor_iban),
        ("to_name", transaction.creditor_name),
        ("to_iban", transaction.creditor_iban),
        ("source_currency", exchange.source_currency if exchange else None),
        ("exchange_rate", exchange.exchange_rate if exchange else None),
        ("target_currency", exchange.target_currency if exchange else None),
        ("transaction_code", transaction.proprietary_bank_transaction_code),
    ]
    return {key: value for key, value in candidates if value is not None}


def to_beancount(transaction: BankTransaction, account: str) -> data.Transaction:
    """
    Convert a bank transaction into a Beancount transaction on ``account``.

    Raises:
        ConversionError: If the booking date or currency is missing or invalid
    """
    entry_date = booking_date(transaction)
    if not transaction.currency:
        raise ConversionError("transaction currency is missing")

    links = frozenset({make_link(transaction.external_id)}) if transaction.external_id else data.EMPTY_SET

    posting = data.Posting(
        account,
        Amount(transaction.amount, transaction.currency),
        None,
        None,
        None,
        None,
    )

    return data.Transaction(
        data.new_metadata(SOURCE_FILENAME, 0, metadata(transaction)),
        entry_date,
        flags.FLAG_OKAY,
        None,
        narration(transaction) or "",
        data.EMPTY_SET,
        links,
        [posting],
    )
