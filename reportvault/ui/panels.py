"""Dashboard panel widgets for reportvault.

Each panel is a self-contained bordered widget that manages its own
slice of dashboard state and UI elements.
"""

from __future__ import annotations

from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Button, Input, Label, Select, Static

from ..core.formats import FORMAT_CHOICES
from ..core.validation import check_password_strength
from .state import ExportState, OpenState


# ── Strength bar ───────────────────────────────────────────────────


class StrengthBar(Static):
    """Five-segment password strength meter."""

    password: reactive[str] = reactive("")
    min_length: int = 8

    def show_password(self, password: str) -> None:
        self.password = password

    @property
    def score(self) -> int:
        return check_password_strength(self.password, self.min_length).score

    def render(self) -> str:
        if not self.password:
            return "[#475569]░░░░░[/] [#94A3B8]Strength[/]"
        strength = check_password_strength(self.password, self.min_length)
        filled = "█" * strength.score
        empty = "░" * (5 - strength.score)
        return (
            f"[{strength.color}]{filled}[/][#475569]{empty}[/] "
            f"[{strength.color}]{strength.label}[/]"
        )


# ── Export panel ───────────────────────────────────────────────────


class ExportPanel(Vertical):
    """Seal a rendered report into an encrypted .enc container."""

    def __init__(self, state: ExportState, **kw) -> None:
        super().__init__(**kw)
        self._state = state

    def compose(self):
        yield Static(
            "Encrypt a rendered report for sharing. The recipient needs the "
            "password to open it.",
            classes="panel-hint",
        )
        with Horizontal(classes="field-row"):
            yield Label("Report", classes="field-label")
            yield Input(
                value=self._state.source_file,
                placeholder="path/to/report.pdf",
                id="export-source",
                classes="field-input",
            )
        with Horizontal(classes="field-row"):
            yield Label("Password", classes="field-label")
            yield Input(
                placeholder=f"At least {self._state.min_password_length} characters",
                password=True,
                id="export-password",
                classes="field-input",
            )
        with Horizontal(classes="field-row"):
            yield Label("Confirm", classes="field-label")
            yield Input(
                placeholder="Repeat password",
                password=True,
                id="export-confirm",
                classes="field-input",
            )
        bar = StrengthBar(id="strength-bar")
        bar.min_length = self._state.min_password_length
        yield bar
        with Horizontal(classes="field-row"):
            yield Label("Format", classes="field-label")
            yield Select(
                [(name, name) for name in FORMAT_CHOICES],
                value=self._state.container_format,
                allow_blank=False,
                id="export-format",
                classes="field-input",
            )
        yield Static(
            "There is no way to recover the report if the password is lost.",
            classes="warning-note",
        )
        yield Button("Encrypt & Save", id="btn-export", classes="action-button")

    def on_mount(self) -> None:
        self.border_title = "EXPORT REPORT"

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "export-source":
            self._state.source_file = event.value
        elif event.input.id == "export-password":
            self._state.password = event.value
            self.query_one("#strength-bar", StrengthBar).show_password(event.value)
        elif event.input.id == "export-confirm":
            self._state.password_confirm = event.value

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "export-format":
            self._state.container_format = event.value

    def clear_passwords(self) -> None:
        self._state.clear_secrets()
        for input_id in ("#export-password", "#export-confirm"):
            self.query_one(input_id, Input).value = ""
        self.query_one("#strength-bar", StrengthBar).show_password("")

    def set_busy(self, busy: bool) -> None:
        self._state.busy = busy
        button = self.query_one("#btn-export", Button)
        button.disabled = busy
        button.label = "Encrypting…" if busy else "Encrypt & Save"


# ── Open panel ─────────────────────────────────────────────────────


class OpenPanel(Vertical):
    """Decrypt a .enc container and hand it to the secure viewer."""

    def __init__(self, state: OpenState, **kw) -> None:
        super().__init__(**kw)
        self._state = state

    def compose(self):
        yield Static(
            "Open an encrypted report. It is decrypted in memory only and "
            "shown read-only.",
            classes="panel-hint",
        )
        with Horizontal(classes="field-row"):
            yield Label("File", classes="field-label")
            yield Input(
                value=self._state.container_file,
                placeholder="path/to/report.enc",
                id="open-file",
                classes="field-input",
            )
        with Horizontal(classes="field-row"):
            yield Label("Password", classes="field-label")
            yield Input(
                placeholder="Report password",
                password=True,
                id="open-password",
                classes="field-input",
            )
        yield Button("Decrypt & View", id="btn-open", classes="action-button")

    def on_mount(self) -> None:
        self.border_title = "OPEN REPORT"

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "open-file":
            self._state.container_file = event.value
        elif event.input.id == "open-password":
            self._state.password = event.value

    def clear_password(self) -> None:
        self._state.clear_secrets()
        self.query_one("#open-password", Input).value = ""

    def set_busy(self, busy: bool) -> None:
        self._state.busy = busy
        button = self.query_one("#btn-open", Button)
        button.disabled = busy
        button.label = "Decrypting…" if busy else "Decrypt & View"
