#!/usr/bin/env python3
"""
GoCardless Bank Account Data API Client

Thin synchronous wrapper around the REST endpoints the importer needs:
token handling, institutions, requisitions and account transactions.
"""

import logging
from datetime import UTC, date, datetime
from decimal import InvalidOperation
from typing import Any

import requests

from .models import AccountTransactions, Institution, Requisition, Tokens

logger = logging.getLogger(__name__)


class GoCardlessError(Exception):
    """Base class for errors talking to GoCardless."""

    pass


class AuthenticationError(GoCardlessError):
    """Raised when no usable access token is available."""

    pass


class APIError(GoCardlessError):
    """
    Raised for failed API calls.

    status_code is None when the request never got a response.
    """

    def __init__(self, status_code: int | None, summary: str, detail: str | None = None) -> None:
        self.status_code = status_code
        self.summary = summary
        self.detail = detail
        message = summary if status_code is None else f"{status_code}: {summary}"
        if detail and detail != summary:
            message = f"{message} ({detail})"
        super().__init__(message)


class GoCardlessClient:
    """
    Client for the GoCardless Bank Account Data API.

    Token endpoints work without an access token; every other call requires
    one and raises AuthenticationError otherwise.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        access_token: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.access_token = access_token
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return self.base_url + path.lstrip("/")

    def _request(
        self,
        method: str,
        path: str,
        *,
        authenticated: bool = True,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Accept": "application/json"}
        if authenticated:
            if not self.access_token:
                raise AuthenticationError("No access token available")
            headers["Authorization"] = f"Bearer {self.access_token}"

        url = self._url(path)
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(
                method, url, headers=headers, params=params, json=json, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise APIError(None, f"Request to {url} failed", str(e)) from e

        if not response.ok:
            raise _error_from_response(response)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIError(response.status_code, "Response is not valid JSON", str(e)) from e

    def obtain_tokens(self, secret_id: str, secret_key: str) -> Tokens:
        """
        Exchange user secrets for an access/refresh token pair.

        Raises:
            APIError: If the API rejects the secrets
            AuthenticationError: If the response lacks a token field
        """
        data = self._request(
            "POST",
            "token/new/",
            authenticated=False,
            json={"secret_id": secret_id, "secret_key": secret_key},
        )
        try:
            return Tokens.from_jwt(datetime.now(UTC), data or {})
        except ValueError as e:
            raise AuthenticationError(str(e)) from e

    def refresh_access_token(self, refresh_token: str) -> tuple[str, int]:
        """
        Get a new access token using a refresh token.

        Returns:
            Tuple of (access token, seconds until it expires)
        """
        data = self._request("POST", "token/refresh/", authenticated=False, json={"refresh": refresh_token})
        data = data or {}
        if not data.get("access"):
            raise AuthenticationError("access token is missing")
        if data.get("access_expires") is None:
            raise AuthenticationError("access token expiration is missing")
        return data["access"], int(data["access_expires"])

    def list_institutions(self, country: str | None = None) -> list[Institution]:
        """List supported institutions, optionally limited to one country."""
        params = {"country": country} if country else None
        data = self._request("GET", "institutions/", params=params)
        return [Institution.from_dict(item) for item in data or []]

    def create_requisition(self, institution_id: str, redirect: str) -> Requisition:
        """
        Create a requisition for an institution.

        The returned requisition carries the link the user must follow to
        authorise access at the bank.

        Raises:
            APIError: If the API fails or the response has no link
        """
        data = self._request(
            "POST",
            "requisitions/",
            json={"redirect": redirect, "institution_id": institution_id},
        )
        requisition = Requisition.from_dict(data)
        if not requisition.link:
            raise APIError(None, "setup link is missing from the gocardless response")
        logger.info("Created requisition %s for %s", requisition.id, institution_id)
        return requisition

    def list_requisitions(self) -> list[Requisition]:
        """List all requisitions, following pagination."""
        requisitions: list[Requisition] = []
        next_page: str | None = "requisitions/"
        while next_page:
            data = self._request("GET", next_page) or {}
            requisitions.extend(Requisition.from_dict(r) for r in data.get("results") or [])
            next_page = data.get("next")
        return requisitions

    def delete_requisition(self, requisition_id: str) -> None:
        """Delete a requisition and the end user agreement behind it."""
        self._request("DELETE", f"requisitions/{requisition_id}/")
        logger.info("Deleted requisition %s", requisition_id)

    def get_raw_transactions(
        self, account_id: str, date_from: date | None = None, date_to: date | None = None
    ) -> dict[str, Any]:
        """Fetch the unparsed transactions response of an account."""
        params: dict[str, Any] = {}
        if date_from is not None:
            params["date_from"] = date_from.isoformat()
        if date_to is not None:
            params["date_to"] = date_to.isoformat()
        return self._request("GET", f"accounts/{account_id}/transactions/", params=params or None) or {}

    def list_transactions(
        self, account_id: str, date_from: date | None = None, date_to: date | None = None
    ) -> AccountTransactions:
        """
        Fetch the booked and pending transactions of an account.

        Raises:
            APIError: If the request fails or a transaction cannot be parsed
        """
        data = self.get_raw_transactions(account_id, date_from, date_to)
        try:
            transactions = AccountTransactions.from_dict(data)
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise APIError(None, f"Malformed transactions for account {account_id}", str(e)) from e
        logger.debug(
            "Account %s: %d booked, %d pending", account_id, len(transactions.booked), len(transactions.pending)
        )
        return transactions


def _error_from_response(response: requests.Response) -> APIError:
    summary = response.reason or "Request failed"
    detail = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        summary = str(body.get("summary") or summary)
        detail_value = body.get("detail")
        detail = str(detail_value) if detail_value is not None else None
    return APIError(response.status_code, summary, detail)
