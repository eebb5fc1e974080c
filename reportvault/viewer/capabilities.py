"""
Platform capability interface for the secure viewer.

Blocking print/save, the context menu and drag, and hiding content when the
host loses visibility are best-effort interceptions of platform
affordances. They deter casual extraction; anyone with developer tools or a
camera defeats them. Each host (Textual, a headless embedder, ...) implements
:class:`PlatformHooks`, and every suppression is a scoped :class:`Override`
handle that restores the original behaviour when released.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

BLOCKED_SHORTCUTS = ("ctrl+p", "ctrl+s", "ctrl+shift+s", "meta+p", "meta+s")

VisibilityCallback = Callable[[bool], None]  # called with hidden=True/False


class Override:
    """Handle for one scoped suppression. ``release()`` restores exactly once."""

    def __init__(self, name: str, restore: Callable[[], None] | None = None):
        self.name = name
        self._restore = restore
        self.released = False

    def release(self) -> bool:
        if self.released:
            return False
        self.released = True
        if self._restore is not None:
            self._restore()
        logger.debug("Released %s override", self.name)
        return True

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.release()

    def __repr__(self) -> str:
        state = "released" if self.released else "active"
        return f"<Override {self.name} {state}>"


class PlatformHooks(ABC):
    """Capabilities a host must provide for the viewer's deterrents."""

    available = True
    # Whether the host is currently hidden (unfocused, minimised, ...)
    hidden = False

    @abstractmethod
    def suppress_print(self) -> Override:
        """Disable the host's native print/export affordance."""

    @abstractmethod
    def suppress_shortcuts(self, keys: Iterable[str] = BLOCKED_SHORTCUTS) -> Override:
        """Swallow the given key chords while the override is active."""

    @abstractmethod
    def suppress_context_menu(self) -> Override:
        """Disable context menu and drag over the rendered content."""

    @abstractmethod
    def on_visibility_change(self, callback: VisibilityCallback) -> Override:
        """Call *callback(hidden)* whenever the host's visibility changes."""


class HeadlessHooks(PlatformHooks):
    """
    In-process host without a real window system.

    Records which affordances are currently suppressed and lets the
    embedding application drive the platform side explicitly via
    ``print()``, ``press()``, ``context_menu()`` and ``set_hidden()``.
    """

    def __init__(self, printer: Callable[[], None] | None = None):
        self._printer = printer
        self._print_blocks = 0
        self._blocked_keys: dict[str, int] = {}
        self._context_blocks = 0
        self._listeners: list[VisibilityCallback] = []
        self.hidden = False

    # -- host side --

    def print(self) -> bool:
        """Invoke the host print action. Returns False when suppressed."""
        if self._print_blocks:
            logger.info("Print disabled while the secure viewer is open")
            return False
        if self._printer is not None:
            self._printer()
        return True

    def press(self, key: str) -> bool:
        """Deliver a key chord. Returns False when it was swallowed."""
        return self._blocked_keys.get(key.lower(), 0) == 0

    def context_menu(self) -> bool:
        """Request a context menu. Returns False when suppressed."""
        return self._context_blocks == 0

    def set_hidden(self, hidden: bool) -> None:
        if hidden == self.hidden:
            return
        self.hidden = hidden
        for callback in list(self._listeners):
            callback(hidden)

    @property
    def print_suppressed(self) -> bool:
        return self._print_blocks > 0

    @property
    def blocked_keys(self) -> set[str]:
        return {key for key, count in self._blocked_keys.items() if count}

    @property
    def context_menu_suppressed(self) -> bool:
        return self._context_blocks > 0

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    # -- capabilities --

    def suppress_print(self) -> Override:
        self._print_blocks += 1

        def restore():
            self._print_blocks -= 1

        return Override("print", restore)

    def suppress_shortcuts(self, keys: Iterable[str] = BLOCKED_SHORTCUTS) -> Override:
        keys = [key.lower() for key in keys]
        for key in keys:
            self._blocked_keys[key] = self._blocked_keys.get(key, 0) + 1

        def restore():
            for key in keys:
                self._blocked_keys[key] -= 1

        return Override("shortcuts", restore)

    def suppress_context_menu(self) -> Override:
        self._context_blocks += 1

        def restore():
            self._context_blocks -= 1

        return Override("context-menu", restore)

    def on_visibility_change(self, callback: VisibilityCallback) -> Override:
        self._listeners.append(callback)
        return Override("visibility", lambda: self._listeners.remove(callback))


class UnavailableHooks(PlatformHooks):
    """
    Host on which the protection layer does not exist (plain pipes, batch
    jobs). Every capability is a no-op handle; the gap is logged once.
    """

    available = False

    def __init__(self):
        self._warned = False

    def _unavailable(self, name: str) -> Override:
        if not self._warned:
            logger.warning(
                "Viewer protections are unavailable on this host; "
                "content is shown without print, shortcut or visibility guards"
            )
            self._warned = True
        return Override(name)

    def suppress_print(self) -> Override:
        return self._unavailable("print")

    def suppress_shortcuts(self, keys: Iterable[str] = BLOCKED_SHORTCUTS) -> Override:
        return self._unavailable("shortcuts")

    def suppress_context_menu(self) -> Override:
        return self._unavailable("context-menu")

    def on_visibility_change(self, callback: VisibilityCallback) -> Override:
        return self._unavailable("visibility")
