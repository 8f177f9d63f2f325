"""
GoCardless Integration Package

Client for the GoCardless Bank Account Data API.

This package provides:
- API client with bearer-token authentication and error translation
- Domain models for tokens, institutions, requisitions and transactions
- Private on-disk token storage with automatic access token refresh
"""

from .client import APIError, AuthenticationError, GoCardlessClient, GoCardlessError
from .models import (
    AccountTransactions,
    BankTransaction,
    CurrencyExchange,
    Institution,
    Requisition,
    RequisitionStatus,
    Tokens,
)
from .tokens import TokenStore

__all__ = [
    # Client and errors
    "APIError",
    "AuthenticationError",
    "GoCardlessClient",
    "GoCardlessError",
    # Domain models
    "AccountTransactions",
    "BankTransaction",
    "CurrencyExchange",
    "Institution",
    "Requisition",
    "RequisitionStatus",
    "Tokens",
    # Token storage
    "TokenStore",
]
