"""
Input validation utilities.

Password strength scoring and policy for the export dialog, payload checks
and container file naming. The codec itself enforces no minimum password
strength; these checks belong to the hosts that collect the password.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePath

MIN_PASSWORD_LENGTH = 8
CONTAINER_SUFFIX = ".enc"

_STRENGTH_COLORS = {
    "Weak": "#DC2626",
    "Fair": "#D97706",
    "Good": "#1A7A4A",
    "Strong": "#16A34A",
}


@dataclass
class PasswordStrength:
    """Result of password strength analysis."""
    score: int            # 0-5
    label: str            # "Weak", "Fair", "Good", "Strong"
    color: str            # meter colour for the label
    is_acceptable: bool   # meets the minimum length


def check_password_strength(password: str, min_length: int = MIN_PASSWORD_LENGTH) -> PasswordStrength:
    """
    Score a password on a 0-5 scale, one point each for:
      - at least 8 characters
      - at least 12 characters
      - an uppercase letter
      - a digit
      - a character that is neither letter nor digit

    Scores 0-1 are Weak, 2-3 Fair, 4 Good, 5 Strong.
    """
    score = 0
    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1
    if re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"[0-9]", password):
        score += 1
    if re.search(r"[^A-Za-z0-9]", password):
        score += 1

    if score <= 1:
        label = "Weak"
    elif score <= 3:
        label = "Fair"
    elif score == 4:
        label = "Good"
    else:
        label = "Strong"

    return PasswordStrength(
        score=score,
        label=label,
        color=_STRENGTH_COLORS[label],
        is_acceptable=len(password) >= min_length,
    )


def check_password_policy(password: str, confirm: str,
                          min_length: int = MIN_PASSWORD_LENGTH) -> tuple[bool, str]:
    """
    Validate an export password and its confirmation.
    Returns (is_valid, error_message).
    """
    if not password:
        return False, "Enter a password."
    if len(password) < min_length:
        return False, f"Password must be at least {min_length} characters."
    if password != confirm:
        return False, "Passwords do not match."
    return True, ""


def validate_payload(payload: bytes) -> tuple[bool, str]:
    """
    Validate a rendered report before sealing.
    Returns (is_valid, error_message).
    """
    if not payload:
        return False, "The report is empty."
    return True, ""


def is_container_filename(name: str) -> bool:
    """Only ``.enc`` files are offered to the open dialog."""
    return name.lower().endswith(CONTAINER_SUFFIX)


def suggest_container_name(document_name: str) -> str:
    """
    Suggested download name for an exported report.

    ``"Vendor MSA.pdf"`` -> ``"Vendor MSA_report.enc"``
    """
    base = PurePath(document_name).name
    if base.lower().endswith(".pdf"):
        base = base[:-4]
    return f"{base or 'document'}_report{CONTAINER_SUFFIX}"
