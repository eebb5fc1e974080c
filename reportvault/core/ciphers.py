"""
AEAD ciphers for report containers.

Both ciphers take a 32-byte key, a 12-byte caller-supplied nonce and append
a 16-byte tag, so they are interchangeable inside the same frame. The raw
frame always uses AES-256-GCM; the versioned frame records ``cipher_id``.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305


class Cipher:
    """Thin wrapper around one ``cryptography`` AEAD primitive.

    ``decrypt`` lets ``cryptography.exceptions.InvalidTag`` propagate; the
    codec maps it to an authentication failure.
    """

    cipher_id: int
    name: str
    primitive: type

    key_size = 32
    nonce_size = 12
    tag_size = 16

    def encrypt(self, key: bytes | bytearray, nonce: bytes, plaintext: bytes,
                aad: bytes | None) -> bytes:
        return self.primitive(bytes(key)).encrypt(nonce, plaintext, aad)

    def decrypt(self, key: bytes | bytearray, nonce: bytes, ciphertext: bytes,
                aad: bytes | None) -> bytes:
        return self.primitive(bytes(key)).decrypt(nonce, ciphertext, aad)


class AES256GCM(Cipher):
    cipher_id = 0x01
    name = "AES-256-GCM"
    primitive = AESGCM


class ChaCha20Poly1305Cipher(Cipher):
    """Faster than AES-GCM on CPUs without AES-NI."""

    cipher_id = 0x02
    name = "ChaCha20-Poly1305"
    primitive = ChaCha20Poly1305


_CIPHERS = (AES256GCM, ChaCha20Poly1305Cipher)

CIPHER_REGISTRY: dict[int, type[Cipher]] = {c.cipher_id: c for c in _CIPHERS}
CIPHER_CHOICES: dict[str, type[Cipher]] = {c.name: c for c in _CIPHERS}
