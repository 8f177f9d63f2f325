#!/usr/bin/env python3
"""Tests for YAML helpers."""

import stat

from gocardless_importer.core.yaml_utils import format_yaml, read_yaml, write_yaml


class TestFormatYaml:
    """Test YAML formatting."""

    def test_block_style_and_key_order(self):
        """Test output is block style and keeps insertion order."""
        text = format_yaml({"transactions": {"booked": [{"b": 1, "a": "x"}]}})

        assert text == "transactions:\n  booked:\n  - b: 1\n    a: x\n"

    def test_unicode_not_escaped(self):
        """Test non-ASCII text stays readable."""
        assert "Café Müller" in format_yaml({"creditorName": "Café Müller"})


class TestWriteYaml:
    """Test YAML writing."""

    def test_write_and_read(self, temp_dir):
        """Test written data reads back and parent directories are created."""
        path = temp_dir / "nested" / "data.yml"

        write_yaml(path, {"key": "value", "number": 3})

        assert read_yaml(path) == {"key": "value", "number": 3}

    def test_mode_applied_to_new_and_existing_files(self, temp_dir):
        """Test the permission bits are set even when the file existed."""
        path = temp_dir / "secret.yml"
        path.write_text("old: true\n")
        path.chmod(0o644)

        write_yaml(path, {"new": True}, mode=0o600)

        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert read_yaml(path) == {"new": True}
