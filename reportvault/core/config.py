"""
Persistent preferences (``~/.config/reportvault/config.toml``).

A deliberately small subset of TOML: one ``key = value`` pair per line,
``#`` comments, quoted or bare strings, integers and booleans
(``true/false/yes/no/1/0``). Unknown keys and invalid values are skipped
so a stale or hand-edited file never blocks the tool.

Passwords are never stored here.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path

from .ciphers import CIPHER_CHOICES
from .formats import FORMAT_CHOICES, FORMAT_RAW
from .kdf import KDF_CHOICES
from .validation import MIN_PASSWORD_LENGTH

_CONFIG_DIR = Path.home() / ".config" / "reportvault"
_CONFIG_FILE = _CONFIG_DIR / "config.toml"

_BOOL_KEYS = {"force"}
_INT_KEYS = {"min_password_length"}
_STR_KEYS = {"format", "kdf", "cipher", "identity", "organization"}

_CHOICES = {
    "format": set(FORMAT_CHOICES),
    "kdf": set(KDF_CHOICES),
    "cipher": set(CIPHER_CHOICES),
}

# argparse defaults: a CLI value equal to these was not chosen by the user.
DEFAULTS = {
    "format": FORMAT_RAW,
    "kdf": "PBKDF2-SHA256",
    "cipher": "AES-256-GCM",
    "identity": None,
    "organization": None,
    "min_password_length": MIN_PASSWORD_LENGTH,
    "force": False,
}

_TRUE = {"true", "yes", "1", "on"}
_FALSE = {"false", "no", "0", "off"}


def _parse_value(key: str, raw: str):
    """Return the typed value for *key*, or None if it is invalid."""
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    elif len(value) >= 2 and value[0] == value[-1] == "'":
        value = value[1:-1]

    if key in _BOOL_KEYS:
        lowered = value.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        return None

    if key in _INT_KEYS:
        try:
            number = int(value)
        except ValueError:
            return None
        return number if number > 0 else None

    if not value:
        return None
    if key in _CHOICES and value not in _CHOICES[key]:
        return None
    return value


def load_config() -> dict:
    """Read preferences. A missing or unreadable file yields ``{}``."""
    try:
        text = _CONFIG_FILE.read_text(encoding="utf-8")
    except OSError:
        return {}

    config: dict = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        key = key.strip()
        if key not in _BOOL_KEYS | _INT_KEYS | _STR_KEYS:
            continue
        value = _parse_value(key, raw)
        if value is not None:
            config[key] = value
    return config


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def save_config(settings: dict) -> Path:
    """Write known, non-None settings with owner-only permissions."""
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    lines = ["# reportvault preferences"]
    for key in sorted(settings):
        if key in DEFAULTS and settings[key] is not None:
            lines.append(f"{key} = {_format_value(settings[key])}")

    fd = os.open(_CONFIG_FILE, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        fh.write("\n".join(lines) + "\n")
    os.chmod(_CONFIG_FILE, 0o600)
    return _CONFIG_FILE


def apply_config_defaults(args: argparse.Namespace, config: dict) -> argparse.Namespace:
    """Fill arguments the user left at their defaults from *config*.

    Explicit command-line values always win.
    """
    for key, value in config.items():
        if not hasattr(args, key):
            continue
        if getattr(args, key) == DEFAULTS.get(key):
            setattr(args, key, value)
    return args
