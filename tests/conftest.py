"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from gocardless_importer.core import config as config_module
from gocardless_importer.gocardless import Tokens, TokenStore
from tests.fixtures.gocardless_data import SAMPLE_LEDGER, make_transaction, make_transactions_response


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests never read or write the real ~/.gocardless
    monkeypatch.setenv("GOCARDLESS_ENV", "test")
    monkeypatch.setenv("GOCARDLESS_HOME", str(tmp_path / "gocardless_home"))
    for name in ("GOCARDLESS_BASE_URL", "GOCARDLESS_TIMEOUT", "GOCARDLESS_REDIRECT_URL", "LOG_LEVEL", "DEBUG"):
        monkeypatch.delenv(name, raising=False)

    # Drop any configuration cached by a previous test
    monkeypatch.setattr(config_module, "_config", None)


@pytest.fixture
def token_file(tmp_path) -> Path:
    """Location of the token file inside the isolated GOCARDLESS_HOME."""
    return tmp_path / "gocardless_home" / "token.yml"


@pytest.fixture
def valid_tokens(token_file) -> Tokens:
    """Store tokens that are valid for another hour."""
    now = datetime.now(UTC)
    tokens = Tokens(
        access_token="test-access",
        access_expires=now + timedelta(hours=1),
        refresh_token="test-refresh",
        refresh_expires=now + timedelta(days=30),
    )
    TokenStore(token_file).save(tokens)
    return tokens


@pytest.fixture
def sample_jwt() -> dict[str, Any]:
    """Response of POST token/new/."""
    return {
        "access": "new-access-token",
        "access_expires": 86400,
        "refresh": "new-refresh-token",
        "refresh_expires": 2592000,
    }


@pytest.fixture
def sample_bank_transaction() -> dict[str, Any]:
    """Booked card payment as returned by the transactions endpoint."""
    return {
        "transactionId": "2024021501234",
        "internalTransactionId": "a1b2c3d4e5",
        "bookingDate": "2024-02-15",
        "valueDate": "2024-02-15",
        "bookingDateTime": "2024-02-15T10:31:00Z",
        "valueDateTime": "2024-02-15T10:31:00Z",
        "transactionAmount": {"amount": "-12.50", "currency": "EUR"},
        "creditorName": "Grocery Store",
        "creditorAccount": {"iban": "DE89370400440532013000"},
        "debtorName": "Jane Doe",
        "debtorAccount": {"iban": "NL91ABNA0417164300"},
        "remittanceInformationUnstructuredArray": ["Card payment", "Grocery Store Berlin"],
        "proprietaryBankTransactionCode": "CARD_PAYMENT",
    }


@pytest.fixture
def sample_transactions_response() -> dict[str, Any]:
    """Transactions response, newest first like the real API."""
    return make_transactions_response(
        booked=[
            make_transaction("tx-3", "2024-02-20", "-5.00", "Coffee"),
            make_transaction("tx-2", "2024-02-18", "1500.00", "Salary"),
            make_transaction("existing-1", "2024-02-01", "-10.00", "Old import"),
        ],
        pending=[
            make_transaction("tx-pending", "2024-02-21", "-3.00", "Pending"),
        ],
    )


@pytest.fixture
def sample_requisition() -> dict[str, Any]:
    """Linked requisition."""
    return {
        "id": "req-1",
        "created": "2024-01-01T12:00:00Z",
        "redirect": "https://example.com/",
        "status": "LN",
        "institution_id": "SANDBOXFINANCE_SFIN0000",
        "agreement": "agr-1",
        "reference": "ref-1",
        "accounts": ["acc-checking", "acc-savings"],
        "link": "https://ob.gocardless.com/psd2/start/req-1/SANDBOXFINANCE_SFIN0000",
    }


@pytest.fixture
def sample_ledger(temp_dir) -> Path:
    """Ledger with one GoCardless account and one imported transaction."""
    path = temp_dir / "main.beancount"
    path.write_text(SAMPLE_LEDGER, encoding="utf-8")
    return path


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "gocardless: Tests for the GoCardless API layer")
    config.addinivalue_line("markers", "ledger: Tests for Beancount ledger handling")
