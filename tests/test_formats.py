"""Tests for the raw and v1 container framings."""

import struct

import pytest

from reportvault.core.errors import FormatError, MalformedContainer
from reportvault.core.formats import (
    HEADER_FORMAT_V1,
    HEADER_SIZE_V1,
    MAGIC,
    MIN_RAW_SIZE,
    MIN_V1_SIZE,
    build_header,
    is_versioned,
    pack_raw,
    pack_v1,
    unpack_raw,
    unpack_v1,
)

SALT = bytes(range(16))
NONCE = bytes(range(100, 112))
CT = b"\xaa" * 16 + b"payload"


class TestRawFrame:
    def test_layout(self):
        blob = pack_raw(SALT, NONCE, CT)
        assert blob[:16] == SALT
        assert blob[16:28] == NONCE
        assert blob[28:] == CT

    def test_unpack(self):
        assert unpack_raw(pack_raw(SALT, NONCE, CT)) == (SALT, NONCE, CT)

    def test_minimum_size_is_44(self):
        assert MIN_RAW_SIZE == 44
        salt, nonce, ct = unpack_raw(bytes(44))
        assert len(ct) == 16

    @pytest.mark.parametrize("length", [0, 1, 27, 28, 43])
    def test_short_blob_rejected(self, length):
        with pytest.raises(MalformedContainer):
            unpack_raw(bytes(length))

    def test_malformed_is_format_error_and_value_error(self):
        with pytest.raises(FormatError):
            unpack_raw(b"")
        with pytest.raises(ValueError):
            unpack_raw(b"")

    def test_pack_checks_sizes(self):
        with pytest.raises(FormatError):
            pack_raw(SALT[:8], NONCE, CT)


class TestV1Frame:
    def test_header_is_20_bytes(self):
        assert HEADER_SIZE_V1 == 20
        assert MIN_V1_SIZE == 64
        assert len(build_header(0x01, 0x03, (100_000, 0, 0))) == 20

    def test_roundtrip(self):
        blob = pack_v1(0x02, 0x02, (3, 65536, 4), SALT, NONCE, CT)
        header, salt, nonce, ct = unpack_v1(blob)
        assert header.version == 1
        assert header.cipher_id == 0x02
        assert header.kdf_id == 0x02
        assert header.kdf_params == (3, 65536, 4)
        assert header.raw == blob[:20]
        assert (salt, nonce, ct) == (SALT, NONCE, CT)

    def test_is_versioned(self):
        assert is_versioned(pack_v1(1, 3, (100_000, 0, 0), SALT, NONCE, CT))
        assert not is_versioned(pack_raw(SALT, NONCE, CT))

    def test_short_rejected(self):
        with pytest.raises(MalformedContainer):
            unpack_v1(build_header(1, 3, (100_000, 0, 0)) + bytes(43))

    def test_bad_magic(self):
        blob = b"XXXX" + pack_v1(1, 3, (100_000, 0, 0), SALT, NONCE, CT)[4:]
        with pytest.raises(FormatError, match="magic"):
            unpack_v1(blob)

    def test_bad_version(self):
        header = struct.pack(HEADER_FORMAT_V1, MAGIC, 2, 1, 3, 0, 100_000, 0, 0)
        with pytest.raises(FormatError, match="version"):
            unpack_v1(header + pack_raw(SALT, NONCE, CT))

    def test_nonzero_reserved(self):
        header = struct.pack(HEADER_FORMAT_V1, MAGIC, 1, 1, 3, 7, 100_000, 0, 0)
        with pytest.raises(FormatError, match="Reserved"):
            unpack_v1(header + pack_raw(SALT, NONCE, CT))
