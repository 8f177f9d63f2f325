#!/usr/bin/env python3
"""
Configuration Management for the GoCardless Importer

Handles environment-based configuration with secure defaults and validation.
Supports multiple environments (development, test, production) so that tests
never touch the real token directory in the user's home.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_BASE_URL = "https://bankaccountdata.gocardless.com/api/v2/"
DEFAULT_REDIRECT_URL = "https://example.com/"
TOKEN_FILE_NAME = "token.yml"


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class GoCardlessConfig:
    """GoCardless Bank Account Data API configuration."""

    home_dir: Path
    base_url: str = DEFAULT_BASE_URL
    timeout: int = 30
    # Where the bank redirects after the user finished a requisition
    redirect_url: str = DEFAULT_REDIRECT_URL

    @property
    def token_file(self) -> Path:
        """Path of the YAML file holding the access and refresh tokens."""
        return self.home_dir / TOKEN_FILE_NAME


@dataclass
class Config:
    """
    Main configuration class for the importer.

    Loads configuration from environment variables with secure defaults
    and validation for each environment type.
    """

    environment: Environment
    gocardless: GoCardlessConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("GOCARDLESS_ENV", "development"))

        if env == Environment.TEST:
            default_home = Path(tempfile.gettempdir()) / "test_gocardless"
        else:
            default_home = Path.home() / ".gocardless"
        home_dir = Path(os.getenv("GOCARDLESS_HOME", str(default_home))).expanduser()

        gocardless = GoCardlessConfig(
            home_dir=home_dir,
            base_url=os.getenv("GOCARDLESS_BASE_URL", DEFAULT_BASE_URL),
            timeout=int(os.getenv("GOCARDLESS_TIMEOUT", "30")),
            redirect_url=os.getenv("GOCARDLESS_REDIRECT_URL", DEFAULT_REDIRECT_URL),
        )

        return cls(
            environment=env,
            gocardless=gocardless,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.gocardless.base_url.startswith(("http://", "https://")):
            errors.append(f"GOCARDLESS_BASE_URL must be an http(s) URL: {self.gocardless.base_url}")
        if not self.gocardless.redirect_url.startswith(("http://", "https://")):
            errors.append(f"GOCARDLESS_REDIRECT_URL must be an http(s) URL: {self.gocardless.redirect_url}")
        if self.gocardless.timeout <= 0:
            errors.append("GoCardless timeout must be positive")
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.log_level}")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        # Configure format based on environment
        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        # Reduce noise from external libraries in production
        if self.environment == Environment.PRODUCTION:
            logging.getLogger("urllib3").setLevel(logging.WARNING)
            logging.getLogger("requests").setLevel(logging.WARNING)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a plain dictionary for display."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if isinstance(field_value, GoCardlessConfig):
                nested = {
                    name: str(value) if isinstance(value, Path) else value
                    for name, value in field_value.__dict__.items()
                }
                nested["token_file"] = str(field_value.token_file)
                result[field_name] = nested
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            else:
                result[field_name] = field_value

        return result


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        config = Config.from_environment()

        # Validate configuration
        errors = config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        # Setup logging
        config.setup_logging()
        _config = config

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()


def is_development() -> bool:
    """Check if running in development environment."""
    return get_config().environment == Environment.DEVELOPMENT


def is_test() -> bool:
    """Check if running in test environment."""
    return get_config().environment == Environment.TEST


def is_production() -> bool:
    """Check if running in production environment."""
    return get_config().environment == Environment.PRODUCTION
