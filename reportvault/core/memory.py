"""
Zeroable buffers for keys, password bytes and decrypted reports.

Python cannot wipe ``str`` or ``bytes`` objects, so anything secret that the
codec or the viewer owns is kept in a ``bytearray`` and overwritten in place
once it is no longer needed. Page locking (mlock) keeps those buffers out of
swap where libc allows it; failure to lock is not an error.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import functools
import sys
from contextlib import contextmanager


@functools.lru_cache(maxsize=None)
def _libc():
    if sys.platform == "win32":
        return None
    name = ctypes.util.find_library("c")
    if not name:
        return None
    try:
        libc = ctypes.CDLL(name, use_errno=True)
    except OSError:
        return None
    for fn in (libc.mlock, libc.munlock):
        fn.argtypes = [ctypes.c_void_p, ctypes.c_size_t]
        fn.restype = ctypes.c_int
    return libc


def _address(buf: bytearray) -> int:
    return ctypes.addressof((ctypes.c_char * len(buf)).from_buffer(buf))


def _page_call(name: str, buf: bytearray) -> bool:
    libc = _libc()
    if libc is None or not buf:
        return False
    try:
        return getattr(libc, name)(_address(buf), len(buf)) == 0
    except (ValueError, TypeError):
        return False


def mlock_buffer(buf: bytearray) -> bool:
    """Pin *buf* in RAM. Returns False when the platform refuses."""
    return _page_call("mlock", buf)


def munlock_buffer(buf: bytearray) -> bool:
    return _page_call("munlock", buf)


def secure_zero(buf: bytearray) -> None:
    """Overwrite *buf* with zeros in place."""
    if buf:
        ctypes.memset(_address(buf), 0, len(buf))


@contextmanager
def wiped(*buffers: bytearray):
    """Zero every buffer on exit, whether or not the block raised.

    Buffers may be grown or replaced inside the block only through slice
    assignment; rebinding the name leaves the new object unwiped.
    """
    try:
        yield buffers
    finally:
        for buf in buffers:
            secure_zero(buf)


class SecureBuffer:
    """
    Locked copy of a decrypted report, wiped on close.

        with SecureBuffer.from_bytes(report_bytes) as buf:
            render(buf.data)
    """

    def __init__(self, size: int):
        self.data = bytearray(size)
        self._locked = mlock_buffer(self.data)
        self.closed = False

    @classmethod
    def from_bytes(cls, content: bytes | bytearray | memoryview) -> "SecureBuffer":
        buf = cls(len(content))
        buf.data[:] = content
        return buf

    def __len__(self) -> int:
        return len(self.data)

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def close(self) -> None:
        secure_zero(self.data)
        if self._locked:
            munlock_buffer(self.data)
            self._locked = False
        self.closed = True
