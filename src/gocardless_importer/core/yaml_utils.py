#!/usr/bin/env python3
"""
YAML Utilities Module

Centralized YAML reading and writing with consistent formatting. Used for the
token file and for dumping raw API responses to the terminal.
"""

import os
from pathlib import Path
from typing import Any

import yaml


def format_yaml(data: Any, sort_keys: bool = False) -> str:
    """
    Format data as a block-style YAML string.

    Args:
        data: Data to format
        sort_keys: If True, sort dictionary keys (default: False)

    Returns:
        YAML document as a string
    """
    return yaml.safe_dump(data, sort_keys=sort_keys, allow_unicode=True, default_flow_style=False)


def read_yaml(filepath: str | Path) -> Any:
    """
    Read data from a YAML file.

    Args:
        filepath: Path to the YAML file

    Returns:
        The parsed YAML data (None for an empty file)
    """
    with open(filepath, encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_yaml(filepath: str | Path, data: Any, mode: int | None = None) -> None:
    """
    Write data to a YAML file.

    Args:
        filepath: Path to the YAML file
        data: Data to write to the file
        mode: Optional permission bits; when given the file is created with
              them and existing files are reset to them
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    content = format_yaml(data)

    if mode is None:
        filepath.write_text(content, encoding="utf-8")
        return

    fd = os.open(filepath, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
    os.chmod(filepath, mode)
