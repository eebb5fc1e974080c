"""Secure, in-memory-only viewing of decrypted reports."""

from .capabilities import (  # noqa: F401
    BLOCKED_SHORTCUTS,
    HeadlessHooks,
    Override,
    PlatformHooks,
    UnavailableHooks,
)
from .guard import PresentationGuard, ViewerState, Visibility  # noqa: F401
from .resource import DisplayResource  # noqa: F401
