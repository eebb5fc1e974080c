"""Secure report viewer screen and the Textual implementation of the
viewer's platform hooks.

Keyboard:
  +  /  -          Zoom in / out
  0                Reset zoom
  Escape           Close the report
"""

from __future__ import annotations

import textwrap
from typing import Callable, Iterable

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.screen import Screen
from textual.widgets import Static

from ..viewer.capabilities import BLOCKED_SHORTCUTS, HeadlessHooks, Override
from ..viewer.guard import PresentationGuard, Visibility
from ..viewer.watermark import COLOR, stamp_page
from .theme import VIEWER_CSS

BASE_PAGE_COLUMNS = 70
PAGE_ASPECT = 0.7  # rows per column of an A4 page in a terminal cell grid
MARK_STYLE = f"{COLOR} dim"
STATUS_BADGE = "🔒 Read-only · No download · No print"

# App methods that write the rendered screen somewhere else.
_EXPORT_METHODS = ("action_screenshot", "save_screenshot", "deliver_screenshot")
_MISSING = object()


class TextualHooks(HeadlessHooks):
    """Viewer capabilities for a running Textual app.

    Print/export suppression also replaces the app's screenshot methods on
    the instance only, and restores them when the override is released.
    """

    def __init__(self, app: App):
        super().__init__()
        self.app = app

    def _blocked(self, *_args, **_kwargs) -> None:
        self.app.notify(
            "Printing, saving and screenshots are disabled while a report is open",
            severity="warning",
        )

    def _replace(self, names: Iterable[str]) -> Callable[[], None]:
        saved = []
        for name in names:
            if not hasattr(self.app, name):
                continue
            saved.append((name, self.app.__dict__.get(name, _MISSING)))
            setattr(self.app, name, self._blocked)

        def restore():
            for name, previous in reversed(saved):
                if previous is _MISSING:
                    delattr(self.app, name)
                else:
                    setattr(self.app, name, previous)

        return restore

    @staticmethod
    def _chain(override: Override, restore: Callable[[], None]) -> Override:
        def release():
            restore()
            override.release()

        return Override(override.name, release)

    def suppress_print(self) -> Override:
        return self._chain(super().suppress_print(), self._replace(_EXPORT_METHODS))

    def suppress_shortcuts(self, keys: Iterable[str] = BLOCKED_SHORTCUTS) -> Override:
        # ctrl+p is bound app-wide to the command palette
        return self._chain(
            super().suppress_shortcuts(keys),
            self._replace(("action_command_palette",)),
        )

    def is_blocked(self, key: str) -> bool:
        return not self.press(key)

    def notify_visibility(self, hidden: bool) -> None:
        """Called by the app on terminal focus loss / regain."""
        self.set_hidden(hidden)


def _wrap_page(text: str, width: int) -> list[str]:
    lines: list[str] = []
    for paragraph in text.splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, width) or [""])
    return lines


class PageView(Static):
    """One report page with the identity watermark stamped into its blanks."""

    ALLOW_SELECT = False

    def __init__(self, text: str, number: int, guard: PresentationGuard, **kw) -> None:
        super().__init__(**kw)
        self.page_text = text
        self.number = number
        self._guard = guard

    def render(self) -> Text:
        width = self._guard.zoom.page_width(BASE_PAGE_COLUMNS)
        lines = _wrap_page(self.page_text, width)
        height = max(len(lines), round(width * PAGE_ASPECT))
        lines += [""] * (height - len(lines))

        rendered = Text(no_wrap=True)
        for row, runs in enumerate(stamp_page(lines, width, self._guard.watermark)):
            if row:
                rendered.append("\n")
            for segment, is_mark in runs:
                rendered.append(segment, style=MARK_STYLE if is_mark else None)
        return rendered


class SecurePages(VerticalScroll):
    """Scrollable page column that swallows right-click and drag."""

    ALLOW_SELECT = False

    def __init__(self, hooks: TextualHooks, **kw) -> None:
        super().__init__(**kw)
        self._hooks = hooks

    def on_mouse_down(self, event: events.MouseDown) -> None:
        if self._hooks.context_menu_suppressed and event.button == 3:
            event.prevent_default()
            event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self._hooks.context_menu_suppressed and event.button:
            event.prevent_default()
            event.stop()


class SecureViewerScreen(Screen):
    """Full-screen, read-only view of a decrypted report.

    The screen owns nothing but rendered text; the decrypted bytes stay in
    the guard's DisplayResource, which is released when this screen is
    unmounted for any reason.
    """

    DEFAULT_CSS = VIEWER_CSS

    BINDINGS = [
        Binding("escape", "close_viewer", "Close"),
        Binding("plus", "zoom_in", "Zoom in"),
        Binding("minus", "zoom_out", "Zoom out"),
        Binding("0", "zoom_reset", "Reset zoom"),
        Binding("ctrl+p", "blocked_shortcut", show=False, priority=True),
        Binding("ctrl+s", "blocked_shortcut", show=False, priority=True),
    ]

    def __init__(self, guard: PresentationGuard, hooks: TextualHooks, pages: list[str], **kw) -> None:
        super().__init__(**kw)
        self.guard = guard
        self.hooks = hooks
        self._pages = pages
        self.blocked_count = 0

    def compose(self) -> ComposeResult:
        with Horizontal(id="viewer-navbar"):
            yield Static(
                f"{self.guard.organization.title()} · Encrypted Report Viewer",
                id="viewer-brand",
            )
            yield Static(self._zoom_label(), id="viewer-zoom")
            yield Static(STATUS_BADGE, id="viewer-badge")
        with SecurePages(self.hooks, id="viewer-pages"):
            for number, text in enumerate(self._pages, start=1):
                yield PageView(text, number, self.guard, classes="page")
        count = len(self._pages)
        yield Static(
            f"{count} {'page' if count == 1 else 'pages'} · Scroll to navigate",
            id="viewer-footer",
        )
        yield Static(
            "Report hidden while this window is in the background",
            id="obscure-overlay",
        )

    def on_mount(self) -> None:
        self.guard.on_visibility = self._apply_visibility
        self._apply_visibility(self.guard.visibility)

    def on_unmount(self) -> None:
        self.guard.on_visibility = None
        self.guard.close()
        self._pages = []

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def obscured(self) -> bool:
        return self.query_one("#obscure-overlay", Static).has_class("-active")

    def _apply_visibility(self, visibility: Visibility) -> None:
        hidden = visibility is Visibility.OBSCURED
        self.query_one("#obscure-overlay", Static).set_class(hidden, "-active")
        self.query_one("#viewer-pages", SecurePages).display = not hidden

    def _zoom_label(self) -> str:
        return f"{self.guard.zoom.percent}%"

    def _refresh_pages(self) -> None:
        self.query_one("#viewer-zoom", Static).update(self._zoom_label())
        for page in self.query(PageView):
            page.refresh(layout=True)

    def on_key(self, event: events.Key) -> None:
        if self.hooks.is_blocked(event.key):
            event.prevent_default()
            event.stop()
            self.action_blocked_shortcut()

    # ── Actions ────────────────────────────────────────────────────

    def action_blocked_shortcut(self) -> None:
        self.blocked_count += 1
        self.notify("Saving and printing are disabled in the secure viewer", severity="warning")

    def action_zoom_in(self) -> None:
        self.guard.zoom_in()
        self._refresh_pages()

    def action_zoom_out(self) -> None:
        self.guard.zoom_out()
        self._refresh_pages()

    def action_zoom_reset(self) -> None:
        self.guard.zoom_reset()
        self._refresh_pages()

    def action_close_viewer(self) -> None:
        self.guard.close()
        self.app.pop_screen()
