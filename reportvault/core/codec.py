"""
Report codec — seals a rendered report into a password-protected container
and opens it again.

This is the main API surface for encrypt/decrypt operations::

    container = seal(pdf_bytes, password)
    pdf_bytes = open(container, password)

Both calls are atomic: they return a complete result or raise, and never
hand back a partial container or partial plaintext. Neither retries.
``seal_async`` / ``open_async`` run the same work on a worker thread so an
event loop stays responsive while the deliberately slow KDF runs.

Security Note:
    Never log passwords, derived keys, plaintext or ciphertext.
"""

from __future__ import annotations

import asyncio
import logging
import os

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm

from .ciphers import AES256GCM, CIPHER_CHOICES, CIPHER_REGISTRY, Cipher
from .errors import (
    AuthenticationFailure,
    ConfigurationError,
    CryptoUnavailable,
    EncryptionFailure,
    FormatError,
    InvalidInput,
)
from .formats import (
    FORMAT_CHOICES,
    FORMAT_RAW,
    FORMAT_V1,
    NONCE_SIZE,
    SALT_SIZE,
    build_header,
    pack_raw,
    unpack_raw,
    unpack_v1,
)
from .kdf import KDF, KDF_CHOICES, PBKDF2_ITERATIONS, PBKDF2SHA256KDF, build_kdf
from .memory import wiped

logger = logging.getLogger(__name__)


def _random_bytes(size: int) -> bytes:
    try:
        return os.urandom(size)
    except NotImplementedError as exc:
        raise CryptoUnavailable("No secure random source available") from exc


def _encode_password(password: str) -> bytearray:
    if not isinstance(password, str) or not password:
        raise InvalidInput("Password must be a non-empty string")
    try:
        return bytearray(password.encode("utf-8"))
    except UnicodeEncodeError:
        # Lone surrogates: pair what can be paired, replace the rest with
        # U+FFFD, the same bytes a browser's TextEncoder produces.
        repaired = password.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
        return bytearray(repaired.encode("utf-8"))


class ReportCodec:
    """
    Configurable seal/open with a fixed container framing.

    Parameters:
        container_format: ``"raw"`` (salt ‖ nonce ‖ ciphertext, protocol
            constants) or ``"v1"`` (header recording cipher, KDF and
            KDF parameters).
        kdf: Key derivation function. The raw frame only accepts
            PBKDF2-SHA256 with the protocol iteration count.
        cipher: AEAD cipher. The raw frame only accepts AES-256-GCM.
    """

    def __init__(
        self,
        container_format: str = FORMAT_RAW,
        kdf: KDF | None = None,
        cipher: Cipher | None = None,
    ):
        if container_format not in FORMAT_CHOICES:
            raise ConfigurationError(
                f"Unknown container format '{container_format}' "
                f"(choose from {', '.join(FORMAT_CHOICES)})"
            )
        self.container_format = container_format
        self.kdf = kdf or PBKDF2SHA256KDF()
        self.cipher = cipher or AES256GCM()

        if container_format == FORMAT_RAW:
            if not isinstance(self.kdf, PBKDF2SHA256KDF) or self.kdf.iterations != PBKDF2_ITERATIONS:
                raise ConfigurationError(
                    f"The raw container format fixes the KDF to PBKDF2-SHA256 "
                    f"with {PBKDF2_ITERATIONS} iterations. Use the v1 format "
                    f"to choose '{self.kdf.name}'."
                )
            if not isinstance(self.cipher, AES256GCM):
                raise ConfigurationError(
                    f"The raw container format fixes the cipher to AES-256-GCM. "
                    f"Use the v1 format to choose '{self.cipher.name}'."
                )

    @classmethod
    def from_names(cls, container_format: str = FORMAT_RAW,
                   kdf_name: str = "PBKDF2-SHA256",
                   cipher_name: str = "AES-256-GCM") -> "ReportCodec":
        """Build a codec from the display names used by the CLI and config."""
        kdf_cls = KDF_CHOICES.get(kdf_name)
        if kdf_cls is None:
            raise ConfigurationError(
                f"Unknown KDF '{kdf_name}' (choose from {', '.join(KDF_CHOICES)})"
            )
        cipher_cls = CIPHER_CHOICES.get(cipher_name)
        if cipher_cls is None:
            raise ConfigurationError(
                f"Unknown cipher '{cipher_name}' (choose from {', '.join(CIPHER_CHOICES)})"
            )
        return cls(container_format, kdf=kdf_cls(), cipher=cipher_cls())

    @property
    def description(self) -> str:
        """Human-readable description of the codec configuration."""
        return f"{self.cipher.name} | {self.kdf.name} | {self.container_format}"

    # ------- SEAL -------

    def seal(self, payload: bytes, password: str) -> bytes:
        """
        Encrypt *payload* under *password*. Returns the container bytes.

        Raises:
            InvalidInput: empty payload or password
            CryptoUnavailable: no random source / primitive unsupported
            EncryptionFailure: the cipher call failed
        """
        if not payload:
            raise InvalidInput("Payload must be non-empty bytes")
        password_bytes = _encode_password(password)

        with wiped(password_bytes):
            salt = _random_bytes(SALT_SIZE)
            nonce = _random_bytes(NONCE_SIZE)

            aad = None
            if self.container_format == FORMAT_V1:
                aad = build_header(self.cipher.cipher_id, self.kdf.kdf_id, self.kdf.params)

            try:
                key = self.kdf.derive(password_bytes, salt)
                with wiped(key):
                    ciphertext = self.cipher.encrypt(key, nonce, bytes(payload), aad)
            except UnsupportedAlgorithm as exc:
                raise CryptoUnavailable(f"{self.description} is not supported here") from exc
            except (ValueError, OverflowError, TypeError) as exc:
                raise EncryptionFailure(f"Sealing failed: {exc}") from exc

        container = (aad or b"") + pack_raw(salt, nonce, ciphertext)
        logger.debug(
            "Sealed %d-byte payload into %d-byte %s container",
            len(payload), len(container), self.container_format,
        )
        return container

    # ------- OPEN -------

    def open(self, container: bytes, password: str) -> bytes:
        """
        Decrypt a container produced by :meth:`seal` with the same format.

        Framing is checked before any key derivation runs, so malformed
        input fails fast.

        Raises:
            MalformedContainer: container shorter than the minimum frame
            FormatError / KDFParameterError: bad v1 header
            AuthenticationFailure: wrong password or tampered container
            CryptoUnavailable: primitive unsupported
        """
        kdf: KDF = self.kdf
        cipher: Cipher = self.cipher
        aad = None
        if self.container_format == FORMAT_V1:
            header, salt, nonce, ciphertext = unpack_v1(container)
            cipher_cls = CIPHER_REGISTRY.get(header.cipher_id)
            if cipher_cls is None:
                raise FormatError(f"Unknown cipher ID {header.cipher_id:#04x}")
            cipher = cipher_cls()
            kdf = build_kdf(header.kdf_id, header.kdf_params)
            aad = header.raw
        else:
            salt, nonce, ciphertext = unpack_raw(container)

        password_bytes = _encode_password(password)
        with wiped(password_bytes):
            try:
                key = kdf.derive(password_bytes, salt)
                with wiped(key):
                    plaintext = cipher.decrypt(key, nonce, ciphertext, aad)
            except InvalidTag:
                logger.debug("Container failed authentication")
                raise AuthenticationFailure("Incorrect password or corrupted file") from None
            except UnsupportedAlgorithm as exc:
                raise CryptoUnavailable(f"{cipher.name} is not supported here") from exc

        logger.debug("Opened %d-byte container", len(container))
        return plaintext

    # ------- ASYNC -------

    async def seal_async(self, payload: bytes, password: str) -> bytes:
        return await asyncio.to_thread(self.seal, payload, password)

    async def open_async(self, container: bytes, password: str) -> bytes:
        return await asyncio.to_thread(self.open, container, password)


_DEFAULT_CODEC = ReportCodec()


def seal(payload: bytes, password: str) -> bytes:
    """Seal *payload* into a raw container (salt ‖ nonce ‖ ciphertext+tag)."""
    return _DEFAULT_CODEC.seal(payload, password)


def open(container: bytes, password: str) -> bytes:  # noqa: A001
    """Open a raw container, returning the original payload bytes."""
    return _DEFAULT_CODEC.open(container, password)


async def seal_async(payload: bytes, password: str) -> bytes:
    return await _DEFAULT_CODEC.seal_async(payload, password)


async def open_async(container: bytes, password: str) -> bytes:
    return await _DEFAULT_CODEC.open_async(container, password)
