"""
Synthetic GoCardless payloads and Beancount ledgers for tests.
"""

from typing import Any

SAMPLE_LEDGER = """option "operating_currency" "EUR"

2024-01-01 open Assets:Bank:Checking EUR
  importer: "gocardless"
  account_id: "acc-checking"

2024-01-01 open Assets:Bank:Savings EUR
  importer: "other"
  account_id: "acc-savings"

2024-01-01 open Expenses:Groceries EUR

2024-02-01 * "Old import" ^id-existing-1
  Assets:Bank:Checking  -10.00 EUR
"""


def make_transaction(
    internal_id: str | None,
    booking_date: str | None,
    amount: str,
    description: str = "Payment",
) -> dict[str, Any]:
    """Minimal API transaction payload."""
    transaction: dict[str, Any] = {
        "transactionAmount": {"amount": amount, "currency": "EUR"},
        "remittanceInformationUnstructured": description,
    }
    if booking_date is not None:
        transaction["bookingDate"] = booking_date
    if internal_id is not None:
        transaction["internalTransactionId"] = internal_id
    return transaction


def make_transactions_response(booked: list[dict[str, Any]], pending: list[dict[str, Any]] | None = None) -> dict:
    """Wrap transactions the way the transactions endpoint does."""
    return {
        "transactions": {"booked": booked, "pending": pending or []},
        "last_updated": "2024-02-21T08:00:00Z",
    }
