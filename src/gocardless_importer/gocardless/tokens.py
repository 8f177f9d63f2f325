#!/usr/bin/env python3
"""
Token Storage

Persists the GoCardless access/refresh token pair in a private YAML file
and hands out a valid access token, refreshing it when needed.
"""

import logging
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

import yaml

from ..core.yaml_utils import read_yaml, write_yaml
from .client import AuthenticationError, GoCardlessClient
from .models import Tokens

logger = logging.getLogger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600


class TokenStore:
    """Token file stored at ``token_file`` (normally ~/.gocardless/token.yml)."""

    def __init__(self, token_file: Path) -> None:
        self.token_file = Path(token_file)

    def exists(self) -> bool:
        return self.token_file.exists()

    def load(self) -> Tokens:
        """
        Load tokens from disk.

        Raises:
            AuthenticationError: If the file is missing or unreadable
        """
        if not self.token_file.exists():
            raise AuthenticationError(f"Token file not found: {self.token_file}")
        try:
            data = read_yaml(self.token_file)
            return Tokens.from_dict(data)
        except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError) as e:
            raise AuthenticationError(f"Token file {self.token_file} is invalid: {e}") from e

    def save(self, tokens: Tokens) -> None:
        """Write tokens, keeping the directory and file private to the user."""
        directory = self.token_file.parent
        directory.mkdir(parents=True, exist_ok=True)
        os.chmod(directory, DIR_MODE)
        write_yaml(self.token_file, tokens.to_dict(), mode=FILE_MODE)
        logger.debug("Saved tokens to %s", self.token_file)

    def get_access_token(self, client: GoCardlessClient, now: datetime | None = None) -> str:
        """
        Return a usable access token.

        Refreshes an expired access token with the refresh token and stores
        the new one so the next invocation can reuse it.

        Raises:
            AuthenticationError: If no tokens are stored or the refresh token expired
        """
        now = now or datetime.now(UTC)
        tokens = self.load()

        if tokens.access_valid(now):
            return tokens.access_token

        if not tokens.refresh_valid(now):
            raise AuthenticationError("refresh token expired")

        logger.info("Access token expired, refreshing")
        access, expires_in = client.refresh_access_token(tokens.refresh_token)
        tokens.access_token = access
        tokens.access_expires = now + timedelta(seconds=expires_in)
        self.save(tokens)
        return access
