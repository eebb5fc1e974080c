"""In-memory holder for decrypted report bytes."""

from __future__ import annotations

import logging
from typing import Callable

from ..core.errors import ResourceRevoked
from ..core.memory import SecureBuffer

logger = logging.getLogger(__name__)


class DisplayResource:
    """
    The only copy of a decrypted report that the viewer keeps.

    Bytes live in a locked, zeroable buffer and are never written to disk.
    ``revoke()`` wipes them and fires *on_revoke* exactly once; later
    calls are no-ops that return False.
    """

    def __init__(self, payload: bytes | bytearray | memoryview,
                 on_revoke: Callable[["DisplayResource"], None] | None = None):
        self._buffer = SecureBuffer.from_bytes(payload)
        self._on_revoke = on_revoke
        self.revoked = False

    @property
    def size(self) -> int:
        return len(self._buffer)

    def view(self) -> memoryview:
        """Read-only view of the decrypted bytes."""
        if self.revoked:
            raise ResourceRevoked("Display resource already released")
        return memoryview(self._buffer.data).toreadonly()

    def revoke(self) -> bool:
        if self.revoked:
            return False
        self.revoked = True
        self._buffer.close()
        logger.debug("Revoked %d-byte display resource", self.size)
        if self._on_revoke is not None:
            self._on_revoke(self)
        return True

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.revoke()
