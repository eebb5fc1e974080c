"""Dashboard state model — holds user input and validation results."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..core.formats import FORMAT_RAW
from ..core.validation import (
    MIN_PASSWORD_LENGTH,
    check_password_policy,
    is_container_filename,
)


@dataclass
class ExportState:
    """Export (seal) panel.  Validation methods return (ok, reason)."""

    source_file: str = ""
    output_dir: str = ""
    password: str = ""
    password_confirm: str = ""
    container_format: str = FORMAT_RAW
    kdf: str = "PBKDF2-SHA256"
    cipher: str = "AES-256-GCM"
    min_password_length: int = MIN_PASSWORD_LENGTH
    force: bool = False
    busy: bool = False

    def validate_source(self) -> tuple[bool, str]:
        if not self.source_file.strip():
            return False, "Choose a report to export"
        return True, ""

    def validate_password(self) -> tuple[bool, str]:
        return check_password_policy(
            self.password, self.password_confirm, self.min_password_length
        )

    def validate(self) -> tuple[bool, str]:
        for validator in (self.validate_source, self.validate_password):
            ok, reason = validator()
            if not ok:
                return False, reason
        return True, ""

    def clear_secrets(self) -> None:
        self.password = ""
        self.password_confirm = ""


@dataclass
class OpenState:
    """Open (decrypt & view) panel."""

    container_file: str = ""
    password: str = ""
    container_format: str = FORMAT_RAW
    busy: bool = False

    def validate_container(self) -> tuple[bool, str]:
        path = self.container_file.strip()
        if not path:
            return False, "Choose an encrypted report"
        if not is_container_filename(Path(path).name):
            return False, "Only .enc files are accepted"
        return True, ""

    def validate_password(self) -> tuple[bool, str]:
        if not self.password:
            return False, "Enter the report password"
        return True, ""

    def validate(self) -> tuple[bool, str]:
        for validator in (self.validate_container, self.validate_password):
            ok, reason = validator()
            if not ok:
                return False, reason
        return True, ""

    def clear_secrets(self) -> None:
        self.password = ""
