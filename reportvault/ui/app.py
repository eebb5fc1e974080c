"""reportvault dashboard — export and open encrypted reports.

Keyboard:
  Tab / Shift+Tab   Navigate between fields
  Enter             Select / activate focused element
  Ctrl+L            Clear all fields
  Ctrl+Q            Quit
  F1                Help
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Input, Static

from .. import __version__
from ..core.codec import ReportCodec
from ..core.document import extract_pages
from ..core.errors import ReportVaultError
from ..core.validation import suggest_container_name, validate_payload
from ..viewer.guard import PresentationGuard
from ..viewer.watermark import DEFAULT_ORGANIZATION
from .panels import ExportPanel, OpenPanel
from .state import ExportState, OpenState
from .theme import DASHBOARD_CSS
from .viewer import SecureViewerScreen, TextualHooks

logger = logging.getLogger(__name__)


class ReportVaultApp(App):
    """Two-panel dashboard: export on the left, open on the right."""

    TITLE = "REPORTVAULT"
    CSS = DASHBOARD_CSS

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+l", "clear_all", "Clear"),
        Binding("f1", "show_help", "Help"),
    ]

    def __init__(
        self,
        identity: str = "",
        organization: str = DEFAULT_ORGANIZATION,
        export_state: ExportState | None = None,
        open_state: OpenState | None = None,
        **kw,
    ) -> None:
        super().__init__(**kw)
        self.identity = identity or "viewer"
        self.organization = organization
        self._export = export_state or ExportState()
        self._open = open_state or OpenState()
        self.hooks = TextualHooks(self)
        self.guard: PresentationGuard | None = None

    # ── Compose ────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        with Horizontal(id="header-bar"):
            yield Static(f"▣ REPORTVAULT v{__version__}", id="header-title")
            yield Static(f"Signed in as {self.identity}", id="header-subtitle")
        with Horizontal(id="dashboard"):
            yield ExportPanel(self._export, id="export-panel", classes="panel")
            yield OpenPanel(self._open, id="open-panel", classes="panel")
        yield Footer()

    def on_mount(self) -> None:
        # Launched from the CLI with a container and password already given
        if self._open.container_file and self._open.password:
            self._start_open()

    def on_unmount(self) -> None:
        if self.guard is not None:
            self.guard.close()

    # ── Host visibility ────────────────────────────────────────────

    def on_app_blur(self, event: events.AppBlur) -> None:
        self.hooks.notify_visibility(True)

    def on_app_focus(self, event: events.AppFocus) -> None:
        self.hooks.notify_visibility(False)

    # ── Buttons ────────────────────────────────────────────────────

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-export":
            self._start_export()
        elif event.button.id == "btn-open":
            self._start_open()

    def _start_export(self) -> None:
        if self._export.busy:
            return
        ok, reason = self._export.validate()
        if not ok:
            self.notify(reason, severity="error")
            return
        self.query_one("#export-panel", ExportPanel).set_busy(True)
        self._do_export()

    def _start_open(self) -> None:
        if self._open.busy:
            return
        ok, reason = self._open.validate()
        if not ok:
            self.notify(reason, severity="error")
            return
        self.query_one("#open-panel", OpenPanel).set_busy(True)
        self._do_open()

    # ── Keyboard actions ───────────────────────────────────────────

    def action_clear_all(self) -> None:
        e, o = self._export, self._open
        e.source_file = ""
        e.clear_secrets()
        o.container_file = ""
        o.clear_secrets()
        for inp in self.query(Input):
            inp.value = ""
        self.notify("All fields cleared")

    def action_show_help(self) -> None:
        self.notify(
            "Keyboard shortcuts:\n"
            "  Tab / Shift+Tab  Navigate fields\n"
            "  Enter            Select / activate\n"
            "  Ctrl+L  Clear all  Ctrl+Q  Quit\n"
            "In the viewer: + / - zoom, 0 reset, Esc close",
            severity="information",
            timeout=10,
        )

    # ── Export ─────────────────────────────────────────────────────

    def _export_target(self, source: Path) -> Path:
        out_dir = Path(self._export.output_dir).expanduser() if self._export.output_dir else source.parent
        return out_dir / suggest_container_name(source.name)

    @work(thread=True, exclusive=True, group="export")
    def _do_export(self) -> None:
        s = self._export
        try:
            source = Path(s.source_file.strip()).expanduser()
            payload = source.read_bytes()
            ok, reason = validate_payload(payload)
            if not ok:
                self.call_from_thread(self.notify, reason, severity="error")
                return

            target = self._export_target(source)
            if target.exists() and not s.force:
                self.call_from_thread(
                    self.notify, f"{target.name} already exists", severity="error"
                )
                return

            codec = ReportCodec.from_names(s.container_format, s.kdf, s.cipher)
            container = codec.seal(payload, s.password)
            target.write_bytes(container)
            logger.info("Exported encrypted report to %s", target)
            self.call_from_thread(self.notify, f"Saved {target}")
        except ReportVaultError as exc:
            logger.debug("Export failed: %s", exc)
            self.call_from_thread(self.notify, exc.user_message, severity="error")
        except OSError as exc:
            self.call_from_thread(
                self.notify, f"Export failed: {exc.strerror or exc}", severity="error"
            )
        finally:
            self.call_from_thread(self._finish_export)

    def _finish_export(self) -> None:
        panel = self.query_one("#export-panel", ExportPanel)
        panel.clear_passwords()
        panel.set_busy(False)

    # ── Open ───────────────────────────────────────────────────────

    def _new_guard(self) -> PresentationGuard:
        return PresentationGuard(
            self.hooks,
            self.identity,
            organization=self.organization,
            codec=ReportCodec(self._open.container_format),
        )

    @work(exclusive=True, group="open")
    async def _do_open(self) -> None:
        s = self._open
        panel = self.query_one("#open-panel", OpenPanel)
        path = Path(s.container_file.strip()).expanduser()
        password = s.password
        try:
            container = await asyncio.to_thread(path.read_bytes)
            guard = self._new_guard()
            resource = await guard.open(container, password)
            try:
                pages = extract_pages(resource.view())
            except BaseException:
                guard.close()
                raise
            self.guard = guard
            await self.push_screen(SecureViewerScreen(guard, self.hooks, pages))
        except ReportVaultError as exc:
            logger.debug("Open failed: %s", exc)
            self.notify(exc.user_message, severity="error")
        except OSError as exc:
            self.notify(f"Could not read file: {exc.strerror or exc}", severity="error")
        finally:
            panel.clear_password()
            panel.set_busy(False)


def run_gui(identity: str = "", organization: str = DEFAULT_ORGANIZATION,
            export_state: ExportState | None = None,
            open_state: OpenState | None = None) -> None:
    """Launch the reportvault dashboard TUI."""
    app = ReportVaultApp(
        identity=identity,
        organization=organization,
        export_state=export_state,
        open_state=open_state,
    )
    app.run()
