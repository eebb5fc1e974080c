"""Tests for the presentation guard state machine."""

import asyncio

import pytest

from reportvault.core.codec import seal
from reportvault.core.document import extract_pages
from reportvault.core.errors import (
    AuthenticationFailure,
    DocumentError,
    MalformedContainer,
    ResourceRevoked,
    ViewerStateError,
)
from reportvault.viewer.capabilities import HeadlessHooks, Override
from reportvault.viewer.guard import PresentationGuard, ViewerState, Visibility


@pytest.fixture
def hooks():
    return HeadlessHooks()


@pytest.fixture
def guard(hooks):
    return PresentationGuard(hooks, "ana@fortiv.example")


class TestShowAndClose:
    def test_show_installs_all_overrides(self, guard, hooks):
        resource = guard.show(b"report body")
        assert guard.state is ViewerState.VIEWING
        assert bytes(resource.view()) == b"report body"
        assert hooks.print_suppressed
        assert hooks.press("ctrl+p") is False
        assert hooks.press("ctrl+s") is False
        assert hooks.context_menu() is False
        assert hooks.listener_count == 1

    def test_close_restores_everything(self, guard, hooks):
        resource = guard.show(b"report body")
        assert guard.close() is True
        assert guard.state is ViewerState.CLOSED
        assert resource.revoked
        assert guard.resource is None
        assert not hooks.print_suppressed
        assert hooks.press("ctrl+p") is True
        assert hooks.context_menu() is True
        assert hooks.listener_count == 0

    def test_close_is_idempotent(self, guard):
        closed = []
        guard.on_close = lambda: closed.append(True)
        guard.show(b"report body")
        assert guard.close() is True
        assert guard.close() is False
        assert closed == [True]

    def test_show_while_viewing(self, guard):
        guard.show(b"one")
        with pytest.raises(ViewerStateError):
            guard.show(b"two")

    def test_empty_document(self, guard, hooks):
        with pytest.raises(DocumentError):
            guard.show(b"")
        assert guard.state is ViewerState.CLOSED
        assert not hooks.print_suppressed

    def test_failed_override_rolls_back(self):
        class BrokenHooks(HeadlessHooks):
            def suppress_context_menu(self) -> Override:
                raise RuntimeError("no window")

        broken = BrokenHooks()
        revoked = []
        guard = PresentationGuard(broken, "ana", on_revoke=revoked.append)
        with pytest.raises(RuntimeError):
            guard.show(b"report body")
        assert guard.state is ViewerState.CLOSED
        assert not broken.print_suppressed
        assert broken.press("ctrl+p") is True
        assert len(revoked) == 1

    def test_zoom(self, guard):
        guard.show(b"report body")
        assert guard.zoom_in() == 115
        assert guard.zoom_out() == 100
        guard.zoom_in()
        assert guard.zoom_reset() == 100
        guard.zoom_in()
        guard.close()
        assert guard.zoom.percent == 100

    def test_watermark(self, guard):
        assert guard.watermark == "ana@fortiv.example  ·  CONFIDENTIAL  ·  FORTIV SOLUTIONS"
        assert len(guard.tiles) == 12


class TestVisibility:
    """Three-page document hidden and shown again."""

    def test_obscured_exactly_while_hidden(self, guard, hooks, three_page_pdf):
        flips = []
        guard.on_visibility = flips.append
        resource = guard.show(three_page_pdf)
        assert len(extract_pages(resource.view())) == 3
        assert not guard.is_obscured

        hooks.set_hidden(True)
        assert guard.is_obscured
        assert guard.visibility is Visibility.OBSCURED

        hooks.set_hidden(False)
        assert not guard.is_obscured
        assert flips == [Visibility.OBSCURED, Visibility.VISIBLE]

    def test_no_flips_after_close(self, guard, hooks):
        flips = []
        guard.on_visibility = flips.append
        guard.show(b"report body")
        guard.close()
        hooks.set_hidden(True)
        assert flips == []

    def test_opened_while_hidden_starts_obscured(self, guard, hooks):
        flips = []
        guard.on_visibility = flips.append
        hooks.set_hidden(True)
        guard.show(b"report body")
        assert guard.is_obscured

        hooks.set_hidden(False)
        assert not guard.is_obscured
        assert flips == [Visibility.VISIBLE]

    def test_close_while_hidden_resets(self, guard, hooks):
        guard.show(b"report body")
        hooks.set_hidden(True)
        guard.close()
        assert guard.visibility is Visibility.VISIBLE


class TestTeardown:
    """Host teardown without an explicit close releases exactly once."""

    def test_context_manager_revokes_once(self, hooks):
        revoked = []
        with PresentationGuard(hooks, "ana", on_revoke=revoked.append) as guard:
            resource = guard.show(b"report body")
        assert revoked == [resource]
        guard.close()
        assert revoked == [resource]
        with pytest.raises(ResourceRevoked):
            resource.view()

    def test_exception_in_body_still_revokes(self, hooks):
        revoked = []
        with pytest.raises(KeyError):
            with PresentationGuard(hooks, "ana", on_revoke=revoked.append) as guard:
                guard.show(b"report body")
                raise KeyError("navigation")
        assert len(revoked) == 1
        assert hooks.listener_count == 0


class TestOpen:
    @pytest.mark.asyncio
    async def test_open_decrypts_and_views(self, guard, hooks):
        container = seal(b"HELLO", "correct-horse")
        resource = await guard.open(container, "correct-horse")
        assert bytes(resource.view()) == b"HELLO"
        assert guard.is_viewing
        guard.close()

    @pytest.mark.asyncio
    async def test_wrong_password_returns_to_closed(self, guard, hooks):
        container = seal(b"HELLO", "correct-horse")
        with pytest.raises(AuthenticationFailure):
            await guard.open(container, "wrong-horse")
        assert guard.state is ViewerState.CLOSED
        assert not hooks.print_suppressed

    @pytest.mark.asyncio
    async def test_malformed_container(self, guard):
        with pytest.raises(MalformedContainer):
            await guard.open(b"short", "correct-horse")
        assert guard.state is ViewerState.CLOSED

    @pytest.mark.asyncio
    async def test_close_during_opening(self, guard, hooks):
        container = seal(b"HELLO", "correct-horse")
        task = asyncio.create_task(guard.open(container, "correct-horse"))
        await asyncio.sleep(0)
        assert guard.state is ViewerState.OPENING
        assert guard.close() is False
        with pytest.raises(ViewerStateError):
            await task
        assert guard.state is ViewerState.CLOSED
        assert not hooks.print_suppressed

    @pytest.mark.asyncio
    async def test_async_context_manager(self, hooks):
        container = seal(b"HELLO", "correct-horse")
        async with PresentationGuard(hooks, "ana") as guard:
            resource = await guard.open(container, "correct-horse")
        assert resource.revoked
        assert guard.state is ViewerState.CLOSED

    @pytest.mark.asyncio
    async def test_open_while_viewing(self, guard):
        guard.show(b"report body")
        with pytest.raises(ViewerStateError):
            await guard.open(b"x" * 64, "correct-horse")
