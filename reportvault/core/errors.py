"""Structured error types for reportvault.

Value-shaped failures inherit from both ``ReportVaultError`` and
``ValueError`` so that code catching ``ValueError`` continues to work.
Every error carries a ``user_message`` that hosts show verbatim; the
exception text itself may carry more detail for logs.

Hierarchy::

    ReportVaultError (Exception)
    +-- CryptoUnavailable      — platform cannot supply the primitives
    +-- EncryptionFailure      — unexpected failure while sealing
    +-- InvalidInput           — empty payload / password at the codec boundary
    +-- FormatError            — container framing problems
    |   +-- MalformedContainer — too short / structurally invalid
    +-- KDFParameterError      — KDF parameters out of bounds or unknown id
    +-- ConfigurationError     — invalid codec setup
    +-- DecryptionError        — opening failed
    |   +-- AuthenticationFailure — wrong password OR tampered data
    +-- DocumentError          — decrypted bytes cannot be paged
    +-- ViewerStateError       — illegal viewer state transition
    +-- ResourceRevoked        — display resource used after release
"""

from __future__ import annotations


class ReportVaultError(Exception):
    """Base class for all reportvault errors."""

    user_message = "Something went wrong."


class CryptoUnavailable(ReportVaultError, RuntimeError):
    """The platform cannot provide the required cryptographic primitives."""

    user_message = "Cannot encrypt or decrypt on this device."


class EncryptionFailure(ReportVaultError, RuntimeError):
    """The cipher failed while sealing a payload."""

    user_message = "Export failed, try again."


class InvalidInput(ReportVaultError, ValueError):
    """Payload or password rejected before any cryptographic work."""

    user_message = "Nothing to encrypt, or no password given."


class FormatError(ReportVaultError, ValueError):
    """Container framing is malformed (bad header, version, length)."""

    user_message = "File is not a valid encrypted report."


class MalformedContainer(FormatError):
    """Container is shorter than the minimum frame or structurally invalid."""


class KDFParameterError(ReportVaultError, ValueError):
    """KDF parameter out of allowed bounds or unknown KDF identifier."""

    user_message = "File is not a valid encrypted report."


class ConfigurationError(ReportVaultError, ValueError):
    """Codec is mis-configured (incompatible format, KDF or cipher)."""

    user_message = "Invalid encryption settings."


class DecryptionError(ReportVaultError, ValueError):
    """Opening a container failed."""

    user_message = "Incorrect password or corrupted file."


class AuthenticationFailure(DecryptionError):
    """Integrity tag did not verify.

    Raised for a wrong password and for a tampered container alike; the two
    causes are deliberately indistinguishable.
    """


class DocumentError(ReportVaultError, ValueError):
    """Decrypted bytes could not be split into displayable pages."""

    user_message = "The report could not be displayed."


class ViewerStateError(ReportVaultError, RuntimeError):
    """Viewer asked to open or show while not closed."""

    user_message = "A report is already open."


class ResourceRevoked(ReportVaultError, RuntimeError):
    """Decrypted content accessed after the viewer released it."""

    user_message = "The report has been closed."
