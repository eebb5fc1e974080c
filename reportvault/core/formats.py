"""
Container binary formats.

Two framings are supported:

  Raw frame (default, the report export format):
    Bytes 0-15:   salt
    Bytes 16-27:  nonce
    Bytes 28+:    ciphertext + 16-byte AEAD tag

    No header, no version byte. KDF (PBKDF2-SHA256, 100 000 iterations)
    and cipher (AES-256-GCM) are protocol constants.

  Versioned frame v1 (opt-in, forward compatible):
    Bytes 0-3:    magic  b"RVLT"
    Bytes 4:      version (0x01)
    Bytes 5:      cipher_id
    Bytes 6:      kdf_id
    Bytes 7:      reserved (0x00)
    Bytes 8-19:   kdf_param1..3 (uint32 big-endian each)
    Bytes 20-35:  salt
    Bytes 36-47:  nonce
    Bytes 48+:    ciphertext + tag

    The 20-byte header is authenticated as AEAD associated data, so
    downgrading or editing KDF parameters fails the tag check.

Containers are raw bytes; persisting them (conventionally as ``.enc``) is
the caller's concern.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import FormatError, MalformedContainer

SALT_SIZE = 16
NONCE_SIZE = 12
TAG_SIZE = 16

RAW_PREFIX_SIZE = SALT_SIZE + NONCE_SIZE          # 28 bytes
MIN_RAW_SIZE = RAW_PREFIX_SIZE + TAG_SIZE         # 44 bytes

FORMAT_RAW = "raw"
FORMAT_V1 = "v1"
FORMAT_CHOICES = (FORMAT_RAW, FORMAT_V1)

MAGIC = b"RVLT"
VERSION_1 = 0x01
HEADER_FORMAT_V1 = "!4sBBBBIII"  # magic, version, cipher_id, kdf_id, reserved, p1, p2, p3
HEADER_SIZE_V1 = struct.calcsize(HEADER_FORMAT_V1)  # 20 bytes
MIN_V1_SIZE = HEADER_SIZE_V1 + MIN_RAW_SIZE         # 64 bytes


@dataclass(frozen=True)
class Header:
    """Decoded v1 header. ``raw`` is the exact byte string used as AAD."""

    version: int
    cipher_id: int
    kdf_id: int
    kdf_params: tuple[int, int, int]
    raw: bytes


def pack_raw(salt: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """Concatenate salt ‖ nonce ‖ ciphertext+tag."""
    if len(salt) != SALT_SIZE or len(nonce) != NONCE_SIZE:
        raise FormatError(
            f"Salt and nonce must be {SALT_SIZE} and {NONCE_SIZE} bytes "
            f"(got {len(salt)} and {len(nonce)})"
        )
    return salt + nonce + ciphertext


def unpack_raw(blob: bytes) -> tuple[bytes, bytes, bytes]:
    """
    Split a raw container into (salt, nonce, ciphertext_with_tag).

    Raises MalformedContainer if the blob cannot hold even an empty
    ciphertext's tag.
    """
    if len(blob) < MIN_RAW_SIZE:
        raise MalformedContainer(
            f"Container too short ({len(blob)} bytes, need >= {MIN_RAW_SIZE})"
        )
    salt = bytes(blob[:SALT_SIZE])
    nonce = bytes(blob[SALT_SIZE:RAW_PREFIX_SIZE])
    return salt, nonce, bytes(blob[RAW_PREFIX_SIZE:])


def build_header(cipher_id: int, kdf_id: int, kdf_params: tuple[int, int, int]) -> bytes:
    """Pack a v1 header; the result doubles as the AEAD associated data."""
    return struct.pack(HEADER_FORMAT_V1, MAGIC, VERSION_1, cipher_id, kdf_id, 0, *kdf_params)


def is_versioned(blob: bytes) -> bool:
    """True if *blob* starts with the v1 magic."""
    return bytes(blob[: len(MAGIC)]) == MAGIC


def pack_v1(cipher_id: int, kdf_id: int, kdf_params: tuple[int, int, int],
            salt: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    return build_header(cipher_id, kdf_id, kdf_params) + pack_raw(salt, nonce, ciphertext)


def unpack_v1(blob: bytes) -> tuple[Header, bytes, bytes, bytes]:
    """
    Parse a v1 container.

    Returns: (header, salt, nonce, ciphertext_with_tag)
    Raises MalformedContainer on short input and FormatError on a bad
    magic, unsupported version or non-zero reserved byte.
    """
    if len(blob) < MIN_V1_SIZE:
        raise MalformedContainer(
            f"Container too short ({len(blob)} bytes, need >= {MIN_V1_SIZE})"
        )
    raw_header = bytes(blob[:HEADER_SIZE_V1])
    magic, version, cipher_id, kdf_id, reserved, p1, p2, p3 = struct.unpack(
        HEADER_FORMAT_V1, raw_header
    )
    if magic != MAGIC:
        raise FormatError("Missing container magic; not a versioned container")
    if version != VERSION_1:
        raise FormatError(
            f"Unsupported container version {version:#04x} (supported: {VERSION_1:#04x})"
        )
    if reserved != 0:
        raise FormatError(f"Reserved header byte must be zero (got {reserved:#04x})")

    header = Header(version, cipher_id, kdf_id, (p1, p2, p3), raw_header)
    salt, nonce, ciphertext = unpack_raw(blob[HEADER_SIZE_V1:])
    return header, salt, nonce, ciphertext
