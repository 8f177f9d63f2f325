#!/usr/bin/env python3
"""
GoCardless Domain Models

Type-safe models representing GoCardless Bank Account Data API structures.
The API speaks camelCase JSON; every model exposes a from_dict() constructor
that accepts the raw response payload.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any


@dataclass
class Tokens:
    """
    Access/refresh token pair with absolute expiry times (UTC).

    The API reports expiries as seconds relative to the moment the token was
    issued, so the caller supplies that moment.
    """

    access_token: str
    access_expires: datetime
    refresh_token: str
    refresh_expires: datetime

    @classmethod
    def from_jwt(cls, now: datetime, data: dict[str, Any]) -> "Tokens":
        """
        Create Tokens from a token/new/ response.

        Args:
            now: Moment the response was received
            data: Dictionary with access, access_expires, refresh, refresh_expires

        Returns:
            Tokens instance

        Raises:
            ValueError: If one of the four fields is missing
        """
        for key, description in [
            ("access", "access token"),
            ("access_expires", "access token expiration"),
            ("refresh", "refresh token"),
            ("refresh_expires", "refresh token expiration"),
        ]:
            if data.get(key) is None:
                raise ValueError(f"{description} is missing")

        return cls(
            access_token=data["access"],
            access_expires=now + timedelta(seconds=int(data["access_expires"])),
            refresh_token=data["refresh"],
            refresh_expires=now + timedelta(seconds=int(data["refresh_expires"])),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tokens":
        """Create Tokens from the persisted token file."""
        return cls(
            access_token=data["access_token"],
            access_expires=_parse_timestamp(data["access_expires"]),
            refresh_token=data["refresh_token"],
            refresh_expires=_parse_timestamp(data["refresh_expires"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted token file layout."""
        return {
            "access_token": self.access_token,
            "access_expires": self.access_expires.isoformat(),
            "refresh_token": self.refresh_token,
            "refresh_expires": self.refresh_expires.isoformat(),
        }

    def access_valid(self, now: datetime | None = None) -> bool:
        """Check whether the access token can still be used."""
        return (now or datetime.now(UTC)) < self.access_expires

    def refresh_valid(self, now: datetime | None = None) -> bool:
        """Check whether the refresh token can still be exchanged."""
        return (now or datetime.now(UTC)) <= self.refresh_expires


def _parse_timestamp(value: str | datetime) -> datetime:
    # PyYAML may already have turned the value into a datetime
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass
class Institution:
    """Bank supported by GoCardless."""

    id: str
    name: str
    bic: str | None = None
    transaction_total_days: int | None = None
    countries: list[str] = field(default_factory=list)
    logo: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Institution":
        total_days = data.get("transaction_total_days")
        return cls(
            id=data["id"],
            name=data["name"],
            bic=data.get("bic"),
            transaction_total_days=int(total_days) if total_days not in (None, "") else None,
            countries=list(data.get("countries") or []),
            logo=data.get("logo"),
        )


class RequisitionStatus(Enum):
    """Requisition lifecycle states as reported by the API."""

    CREATED = "CR"
    GIVING_CONSENT = "GC"
    UNDERGOING_AUTHENTICATION = "UA"
    REJECTED = "RJ"
    SELECTING_ACCOUNTS = "SA"
    GRANTING_ACCESS = "GA"
    LINKED = "LN"
    SUSPENDED = "SU"
    EXPIRED = "EX"

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    RequisitionStatus.CREATED: "Created (not set up yet)",
    RequisitionStatus.GIVING_CONSENT: "Giving consent",
    RequisitionStatus.UNDERGOING_AUTHENTICATION: "Undergoing authentication",
    RequisitionStatus.REJECTED: "Rejected",
    RequisitionStatus.SELECTING_ACCOUNTS: "Selecting accounts",
    RequisitionStatus.GRANTING_ACCESS: "Granting access",
    RequisitionStatus.LINKED: "Linked",
    RequisitionStatus.SUSPENDED: "Suspended",
    RequisitionStatus.EXPIRED: "Expired",
}


@dataclass
class Requisition:
    """
    Authorised link between this tool and a bank institution.

    status_code keeps the raw code so states added to the API later are
    still shown; status is None for codes this module does not know.
    """

    id: str | None
    institution_id: str
    status_code: str | None = None
    agreement: str | None = None
    link: str | None = None
    accounts: list[str] = field(default_factory=list)
    redirect: str | None = None
    reference: str | None = None
    created: str | None = None

    @property
    def status(self) -> RequisitionStatus | None:
        if self.status_code is None:
            return None
        try:
            return RequisitionStatus(self.status_code)
        except ValueError:
            return None

    @property
    def status_description(self) -> str:
        status = self.status
        if status is not None:
            return status.description
        return self.status_code or "Unknown"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Requisition":
        return cls(
            id=data.get("id"),
            institution_id=data["institution_id"],
            status_code=data.get("status"),
            agreement=data.get("agreement"),
            link=data.get("link"),
            accounts=list(data.get("accounts") or []),
            redirect=data.get("redirect"),
            reference=data.get("reference"),
            created=data.get("created"),
        )


@dataclass
class CurrencyExchange:
    """Exchange details of a foreign-currency transaction."""

    source_currency: str | None = None
    exchange_rate: str | None = None
    target_currency: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | list[dict[str, Any]]) -> "CurrencyExchange":
        # Newer API versions return a list of exchanges
        if isinstance(data, list):
            data = data[0] if data else {}
        rate = data.get("exchangeRate")
        return cls(
            source_currency=data.get("sourceCurrency"),
            exchange_rate=str(rate) if rate is not None else None,
            target_currency=data.get("targetCurrency"),
        )


@dataclass
class BankTransaction:
    """
    Single transaction as reported by the bank through GoCardless.

    Amounts keep the sign used by the API: negative for money leaving the
    account.
    """

    amount: Decimal
    currency: str
    transaction_id: str | None = None
    internal_transaction_id: str | None = None
    booking_date: str | None = None
    value_date: str | None = None
    booking_date_time: str | None = None
    value_date_time: str | None = None
    creditor_name: str | None = None
    creditor_iban: str | None = None
    debtor_name: str | None = None
    debtor_iban: str | None = None
    remittance_information_unstructured: str | None = None
    remittance_information_unstructured_array: list[str] = field(default_factory=list)
    currency_exchange: CurrencyExchange | None = None
    proprietary_bank_transaction_code: str | None = None

    @property
    def external_id(self) -> str | None:
        """Identifier used to recognise the transaction on later imports."""
        return self.internal_transaction_id or self.transaction_id

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BankTransaction":
        """
        Create BankTransaction from an API transaction object.

        Raises:
            ValueError: If the amount is missing or not a decimal number
        """
        transaction_amount = data.get("transactionAmount") or {}
        raw_amount = transaction_amount.get("amount")
        try:
            amount = Decimal(str(raw_amount))
        except InvalidOperation as e:
            raise ValueError(f"Invalid transaction amount: {raw_amount!r}") from e
        if raw_amount is None or not amount.is_finite():
            raise ValueError(f"Invalid transaction amount: {raw_amount!r}")

        exchange = data.get("currencyExchange")

        return cls(
            amount=amount,
            currency=transaction_amount.get("currency", ""),
            transaction_id=data.get("transactionId"),
            internal_transaction_id=data.get("internalTransactionId"),
            booking_date=data.get("bookingDate"),
            value_date=data.get("valueDate"),
            booking_date_time=data.get("bookingDateTime"),
            value_date_time=data.get("valueDateTime"),
            creditor_name=data.get("creditorName"),
            creditor_iban=(data.get("creditorAccount") or {}).get("iban"),
            debtor_name=data.get("debtorName"),
            debtor_iban=(data.get("debtorAccount") or {}).get("iban"),
            remittance_information_unstructured=data.get("remittanceInformationUnstructured"),
            remittance_information_unstructured_array=list(
                data.get("remittanceInformationUnstructuredArray") or []
            ),
            currency_exchange=CurrencyExchange.from_dict(exchange) if exchange else None,
            proprietary_bank_transaction_code=data.get("proprietaryBankTransactionCode"),
        )


@dataclass
class AccountTransactions:
    """Booked and pending transactions of one account."""

    booked: list[BankTransaction] = field(default_factory=list)
    pending: list[BankTransaction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccountTransactions":
        transactions = data.get("transactions") or {}
        return cls(
            booked=[BankTransaction.from_dict(t) for t in transactions.get("booked") or []],
            pending=[BankTransaction.from_dict(t) for t in transactions.get("pending") or []],
        )
