"""
Presentation guard — the display-time policy around a decrypted report.

State machine::

    CLOSED --open()--> OPENING --decrypt ok--> VIEWING --close()--> CLOSED
                          |
                          +--decrypt fails--> CLOSED   (error re-raised)

Inside VIEWING a visibility sub-state flips between VISIBLE and OBSCURED
as the host reports being hidden or shown again.

While VIEWING the guard holds the decrypted bytes in a DisplayResource and
four scoped overrides from the host (print, shortcuts, context menu,
visibility). ``close()`` releases all of them on every exit path: explicit
close, host teardown, or leaving a ``with`` block.

This is a deterrent layer, not DRM.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from enum import Enum
from typing import Callable, Iterable

from ..core.codec import ReportCodec
from ..core.errors import DocumentError, ViewerStateError
from .capabilities import BLOCKED_SHORTCUTS, PlatformHooks
from .resource import DisplayResource
from .watermark import DEFAULT_ORGANIZATION, WatermarkTile, watermark_text, watermark_tiles
from .zoom import Zoom

logger = logging.getLogger(__name__)


class ViewerState(Enum):
    CLOSED = "closed"
    OPENING = "opening"
    VIEWING = "viewing"


class Visibility(Enum):
    VISIBLE = "visible"
    OBSCURED = "obscured"


class PresentationGuard:
    """
    Parameters:
        hooks: Host capabilities used to suppress export paths.
        identity: Viewer identity stamped into the watermark (e.g. email).
        organization: Second watermark field.
        codec: Codec used by :meth:`open`; defaults to the raw format.
        on_close: Called once each time the guard leaves VIEWING.
        on_visibility: Called with the new :class:`Visibility` on each flip.
        on_revoke: Passed through to the DisplayResource.
        shortcuts: Key chords to swallow while viewing.
    """

    def __init__(
        self,
        hooks: PlatformHooks,
        identity: str,
        *,
        organization: str = DEFAULT_ORGANIZATION,
        codec: ReportCodec | None = None,
        on_close: Callable[[], None] | None = None,
        on_visibility: Callable[[Visibility], None] | None = None,
        on_revoke: Callable[[DisplayResource], None] | None = None,
        shortcuts: Iterable[str] = BLOCKED_SHORTCUTS,
    ):
        self.hooks = hooks
        self.identity = identity
        self.organization = organization
        self.codec = codec or ReportCodec()
        self.shortcuts = tuple(shortcuts)
        self.zoom = Zoom()

        self.on_close = on_close
        self.on_visibility = on_visibility
        self.on_revoke = on_revoke

        self.state = ViewerState.CLOSED
        self.visibility = Visibility.VISIBLE
        self.resource: DisplayResource | None = None
        self._overrides: ExitStack | None = None
        self._close_requested = False

    # ------- watermark / status -------

    @property
    def watermark(self) -> str:
        return watermark_text(self.identity, self.organization)

    @property
    def tiles(self) -> list[WatermarkTile]:
        return watermark_tiles(self.identity, self.organization)

    @property
    def is_viewing(self) -> bool:
        return self.state is ViewerState.VIEWING

    @property
    def is_obscured(self) -> bool:
        return self.is_viewing and self.visibility is Visibility.OBSCURED

    def _transition(self, state: ViewerState) -> None:
        logger.debug("Viewer %s -> %s", self.state.value, state.value)
        self.state = state

    def _require_closed(self) -> None:
        if self.state is not ViewerState.CLOSED:
            raise ViewerStateError(f"Viewer is {self.state.value}, not closed")

    # ------- opening -------

    async def open(self, container: bytes, password: str) -> DisplayResource:
        """Decrypt *container* off the event loop, then start viewing it.

        Any failure returns the guard to CLOSED and propagates; no partial
        viewing state exists.
        """
        self._require_closed()
        self._close_requested = False
        self._transition(ViewerState.OPENING)
        try:
            payload = await self.codec.open_async(container, password)
        except BaseException:
            self._transition(ViewerState.CLOSED)
            raise

        if self._close_requested:
            self._transition(ViewerState.CLOSED)
            raise ViewerStateError("Viewer was closed while the report was opening")
        return self._present(payload)

    def show(self, payload: bytes) -> DisplayResource:
        """Start viewing bytes that were already decrypted by the caller."""
        self._require_closed()
        return self._present(payload)

    def _present(self, payload: bytes) -> DisplayResource:
        if not payload:
            self._transition(ViewerState.CLOSED)
            raise DocumentError("Report is empty")

        resource = DisplayResource(payload, on_revoke=self.on_revoke)
        stack = ExitStack()
        try:
            stack.enter_context(self.hooks.suppress_print())
            stack.enter_context(self.hooks.suppress_shortcuts(self.shortcuts))
            stack.enter_context(self.hooks.suppress_context_menu())
            stack.enter_context(self.hooks.on_visibility_change(self._handle_visibility))
        except BaseException:
            stack.close()
            resource.revoke()
            self._transition(ViewerState.CLOSED)
            raise

        self.resource = resource
        self._overrides = stack
        self.visibility = Visibility.OBSCURED if self.hooks.hidden else Visibility.VISIBLE
        self._transition(ViewerState.VIEWING)
        return resource

    # ------- visibility -------

    def _handle_visibility(self, hidden: bool) -> None:
        if not self.is_viewing:
            return
        visibility = Visibility.OBSCURED if hidden else Visibility.VISIBLE
        if visibility is self.visibility:
            return
        self.visibility = visibility
        logger.debug("Viewer %s", visibility.value)
        if self.on_visibility is not None:
            self.on_visibility(visibility)

    # ------- zoom -------

    def zoom_in(self) -> int:
        self.zoom.zoom_in()
        return self.zoom.percent

    def zoom_out(self) -> int:
        self.zoom.zoom_out()
        return self.zoom.percent

    def zoom_reset(self) -> int:
        self.zoom.reset()
        return self.zoom.percent

    # ------- closing -------

    def close(self) -> bool:
        """Release overrides and the decrypted bytes. Safe to call repeatedly.

        Returns True if this call ended a viewing session.
        """
        if self.state is ViewerState.OPENING:
            self._close_requested = True
            return False
        if self.state is ViewerState.CLOSED:
            return False

        overrides, resource = self._overrides, self.resource
        self._overrides = None
        self.resource = None
        try:
            if overrides is not None:
                overrides.close()
        finally:
            if resource is not None:
                resource.revoke()
            self.visibility = Visibility.VISIBLE
            self.zoom.reset()
            self._transition(ViewerState.CLOSED)

        if self.on_close is not None:
            self.on_close()
        return True

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *_):
        self.close()
