"""
Key Derivation Function implementations.

PBKDF2-HMAC-SHA256 is the protocol KDF of the raw container frame: its
iteration count is frozen at ``PBKDF2_ITERATIONS`` because the raw frame
does not record it. Argon2id and Scrypt are available to the versioned
frame, which stores the KDF id and parameters in its header.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod

from argon2.low_level import Type as Argon2Type
from argon2.low_level import hash_secret_raw
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .errors import KDFParameterError

PBKDF2_ITERATIONS = 100_000
SALT_SIZE = 16
KEY_SIZE = 32


class KDF(ABC):
    """Abstract base for key derivation functions."""

    @property
    @abstractmethod
    def kdf_id(self) -> int:
        """Unique byte identifier stored in the versioned header."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name."""

    @property
    @abstractmethod
    def params(self) -> tuple[int, int, int]:
        """The three tuning parameters recorded in the versioned header."""

    salt_size = SALT_SIZE

    @abstractmethod
    def derive(self, password: bytes | bytearray, salt: bytes, key_length: int = KEY_SIZE) -> bytearray:
        """Derive a key from a password (as bytes/bytearray) and salt.

        Returns a mutable bytearray so callers can zero it after use.
        """

    def generate_salt(self) -> bytes:
        return os.urandom(self.salt_size)


class PBKDF2SHA256KDF(KDF):
    """PBKDF2 with HMAC-SHA256 (RFC 8018). Protocol KDF of the raw frame."""

    kdf_id = 0x03
    name = "PBKDF2-SHA256"

    def __init__(self, iterations: int = PBKDF2_ITERATIONS):
        self.iterations = iterations

    @property
    def params(self) -> tuple[int, int, int]:
        return (self.iterations, 0, 0)

    def derive(self, password: bytes | bytearray, salt: bytes, key_length: int = KEY_SIZE) -> bytearray:
        kdf = PBKDF2HMAC(
            algorithm=SHA256(),
            length=key_length,
            salt=salt,
            iterations=self.iterations,
        )
        return bytearray(kdf.derive(bytes(password)))


class Argon2idKDF(KDF):
    """
    Argon2id - OWASP and IETF recommended KDF (RFC 9106).

    Default parameters follow OWASP 2024 guidelines:
      time_cost=3, memory_cost=65536 (64 MiB), parallelism=4
    """

    kdf_id = 0x02
    name = "Argon2id"

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4):
        self.time_cost = time_cost
        self.memory_cost = memory_cost
        self.parallelism = parallelism

    @property
    def params(self) -> tuple[int, int, int]:
        return (self.time_cost, self.memory_cost, self.parallelism)

    def derive(self, password: bytes | bytearray, salt: bytes, key_length: int = KEY_SIZE) -> bytearray:
        result = hash_secret_raw(
            secret=bytes(password),
            salt=salt,
            time_cost=self.time_cost,
            memory_cost=self.memory_cost,
            parallelism=self.parallelism,
            hash_len=key_length,
            type=Argon2Type.ID,
        )
        return bytearray(result)


class ScryptKDF(KDF):
    """
    Scrypt KDF (RFC 7914).

    Default n=2^17 (131072) per OWASP 2024 interactive-use recommendation.
    """

    kdf_id = 0x01
    name = "Scrypt"

    def __init__(self, n: int = 2**17, r: int = 8, p: int = 1):
        self.n = n
        self.r = r
        self.p = p

    @property
    def params(self) -> tuple[int, int, int]:
        return (self.n, self.r, self.p)

    def derive(self, password: bytes | bytearray, salt: bytes, key_length: int = KEY_SIZE) -> bytearray:
        kdf = Scrypt(
            salt=salt,
            length=key_length,
            n=self.n,
            r=self.r,
            p=self.p,
        )
        return bytearray(kdf.derive(bytes(password)))


KDF_REGISTRY: dict[int, type[KDF]] = {
    0x01: ScryptKDF,
    0x02: Argon2idKDF,
    0x03: PBKDF2SHA256KDF,
}

KDF_CHOICES: dict[str, type[KDF]] = {
    "PBKDF2-SHA256": PBKDF2SHA256KDF,
    "Argon2id": Argon2idKDF,
    "Scrypt": ScryptKDF,
}


# Parameter limits for headers read from untrusted containers.
_PBKDF2_LIMITS = {
    "iterations": (10_000, 10_000_000),
}
_ARGON2_LIMITS = {
    "time_cost": (1, 100),
    "memory_cost": (1024, 4194304),  # 1 MiB to 4 GiB in KiB
    "parallelism": (1, 64),
}
_SCRYPT_LIMITS = {
    "n": (2**10, 2**25),
    "r": (1, 64),
    "p": (1, 64),
}


def _validate_param(name: str, value: int, lo: int, hi: int) -> None:
    """Raise KDFParameterError if a KDF parameter is out of bounds."""
    if value < lo or value > hi:
        raise KDFParameterError(
            f"KDF parameter {name}={value} out of allowed range [{lo}, {hi}]"
        )


def build_kdf(kdf_id: int, params: tuple[int, int, int]) -> KDF:
    """Reconstruct a KDF instance from header params.

    Validates parameter bounds so a malformed or adversarial header cannot
    trigger unbounded work.
    """
    p1, p2, p3 = params
    if kdf_id == PBKDF2SHA256KDF.kdf_id:
        _validate_param("PBKDF2 iterations", p1, *_PBKDF2_LIMITS["iterations"])
        if p2 or p3:
            raise KDFParameterError("PBKDF2 header parameters 2 and 3 must be zero")
        return PBKDF2SHA256KDF(iterations=p1)
    if kdf_id == Argon2idKDF.kdf_id:
        _validate_param("Argon2id time_cost", p1, *_ARGON2_LIMITS["time_cost"])
        _validate_param("Argon2id memory_cost", p2, *_ARGON2_LIMITS["memory_cost"])
        _validate_param("Argon2id parallelism", p3, *_ARGON2_LIMITS["parallelism"])
        return Argon2idKDF(time_cost=p1, memory_cost=p2, parallelism=p3)
    if kdf_id == ScryptKDF.kdf_id:
        _validate_param("Scrypt n", p1, *_SCRYPT_LIMITS["n"])
        _validate_param("Scrypt r", p2, *_SCRYPT_LIMITS["r"])
        _validate_param("Scrypt p", p3, *_SCRYPT_LIMITS["p"])
        if p1 & (p1 - 1):
            raise KDFParameterError(f"Scrypt n={p1} must be a power of two")
        return ScryptKDF(n=p1, r=p2, p=p3)
    raise KDFParameterError(f"Unknown KDF ID {kdf_id:#04x}")
