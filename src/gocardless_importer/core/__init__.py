"""
Core Utilities Package

Shared configuration and serialization helpers used by the API client,
the ledger layer and the CLI.
"""

from .config import (
    Config,
    Environment,
    GoCardlessConfig,
    get_config,
    is_development,
    is_production,
    is_test,
    reload_config,
)
from .yaml_utils import format_yaml, read_yaml, write_yaml

__all__ = [
    # Configuration
    "Config",
    "Environment",
    "GoCardlessConfig",
    "get_config",
    "is_development",
    "is_production",
    "is_test",
    "reload_config",
    # YAML helpers
    "format_yaml",
    "read_yaml",
    "write_yaml",
]
