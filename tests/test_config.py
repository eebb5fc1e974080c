"""Tests for persistent preferences (config.toml)."""

import argparse
import os
import stat
import tempfile
from pathlib import Path
from unittest.mock import patch

from reportvault.core.config import (
    DEFAULTS,
    apply_config_defaults,
    load_config,
    save_config,
)


class TestSaveLoadConfig:
    """Test config save/load roundtrip."""

    def test_save_and_load_roundtrip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            with patch("reportvault.core.config._CONFIG_DIR", Path(tmpdir)), \
                 patch("reportvault.core.config._CONFIG_FILE", cfg_file):
                settings = {
                    "format": "v1",
                    "kdf": "Argon2id",
                    "cipher": "ChaCha20-Poly1305",
                    "identity": 'ana "the auditor"@fortiv.example',
                    "min_password_length": 12,
                    "force": True,
                }
                save_config(settings)
                loaded = load_config()
                assert loaded == settings

    def test_none_and_unknown_not_written(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            with patch("reportvault.core.config._CONFIG_DIR", Path(tmpdir)), \
                 patch("reportvault.core.config._CONFIG_FILE", cfg_file):
                save_config({"identity": None, "password": "hunter2", "format": "raw"})
                text = cfg_file.read_text()
                assert "identity" not in text
                assert "password" not in text
                assert 'format = "raw"' in text

    def test_file_permissions(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            with patch("reportvault.core.config._CONFIG_DIR", Path(tmpdir)), \
                 patch("reportvault.core.config._CONFIG_FILE", cfg_file):
                path = save_config({"format": "v1"})
                assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_missing_file_returns_empty(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "nonexistent" / "config.toml"
            with patch("reportvault.core.config._CONFIG_FILE", cfg_file):
                assert load_config() == {}

    def test_invalid_keys_and_values_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            cfg_file.write_text(
                "# comment\n"
                'unknown_key = "value"\n'
                'cipher = "InvalidCipher"\n'
                'kdf = "Scrypt"\n'
                "min_password_length = -3\n"
                "force = maybe\n"
                "not a pair\n"
            )
            with patch("reportvault.core.config._CONFIG_FILE", cfg_file):
                assert load_config() == {"kdf": "Scrypt"}

    def test_boolean_spellings(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            for raw, expected in [("yes", True), ("0", False), ("TRUE", True), ("off", False)]:
                cfg_file.write_text(f"force = {raw}\n")
                with patch("reportvault.core.config._CONFIG_FILE", cfg_file):
                    assert load_config()["force"] is expected


class TestApplyConfigDefaults:
    def _args(self, **overrides):
        values = dict(DEFAULTS)
        values.update(overrides)
        return argparse.Namespace(**values)

    def test_config_fills_defaults(self):
        args = apply_config_defaults(self._args(), {"format": "v1", "identity": "ana@fortiv.example"})
        assert args.format == "v1"
        assert args.identity == "ana@fortiv.example"

    def test_explicit_cli_value_wins(self):
        args = apply_config_defaults(self._args(kdf="Scrypt"), {"kdf": "Argon2id"})
        assert args.kdf == "Scrypt"

    def test_unknown_attribute_ignored(self):
        args = apply_config_defaults(argparse.Namespace(format="raw"), {"kdf": "Scrypt"})
        assert not hasattr(args, "kdf")
