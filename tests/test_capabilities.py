"""Tests for the host capability interface."""

import logging

from reportvault.viewer.capabilities import (
    BLOCKED_SHORTCUTS,
    HeadlessHooks,
    Override,
    UnavailableHooks,
)


class TestOverride:
    def test_release_runs_once(self):
        calls = []
        override = Override("print", lambda: calls.append(1))
        assert override.release() is True
        assert override.release() is False
        assert calls == [1]
        assert override.released

    def test_context_manager(self):
        calls = []
        with Override("print", lambda: calls.append(1)) as override:
            assert not override.released
        assert calls == [1]


class TestHeadlessHooks:
    def test_print_suppressed_and_restored(self):
        printed = []
        hooks = HeadlessHooks(printer=lambda: printed.append(True))
        with hooks.suppress_print():
            assert hooks.print() is False
            assert hooks.print_suppressed
        assert hooks.print() is True
        assert printed == [True]

    def test_shortcuts(self):
        hooks = HeadlessHooks()
        with hooks.suppress_shortcuts():
            assert hooks.blocked_keys == set(BLOCKED_SHORTCUTS)
            assert hooks.press("ctrl+p") is False
            assert hooks.press("CTRL+S") is False
            assert hooks.press("ctrl+c") is True
        assert hooks.press("ctrl+p") is True
        assert hooks.blocked_keys == set()

    def test_nested_suppression_counts(self):
        hooks = HeadlessHooks()
        outer = hooks.suppress_context_menu()
        inner = hooks.suppress_context_menu()
        inner.release()
        assert hooks.context_menu() is False
        outer.release()
        assert hooks.context_menu() is True

    def test_visibility_listeners(self):
        hooks = HeadlessHooks()
        seen = []
        override = hooks.on_visibility_change(seen.append)
        hooks.set_hidden(True)
        hooks.set_hidden(True)
        hooks.set_hidden(False)
        assert seen == [True, False]
        override.release()
        assert hooks.listener_count == 0
        hooks.set_hidden(True)
        assert seen == [True, False]


class TestUnavailableHooks:
    def test_not_available(self):
        assert UnavailableHooks.available is False
        assert HeadlessHooks.available is True

    def test_warns_once(self, caplog):
        hooks = UnavailableHooks()
        with caplog.at_level(logging.WARNING, logger="reportvault.viewer.capabilities"):
            hooks.suppress_print().release()
            hooks.suppress_shortcuts().release()
            hooks.on_visibility_change(lambda hidden: None).release()
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
