"""Core cryptographic modules."""

from .errors import (  # noqa: F401
    AuthenticationFailure,
    ConfigurationError,
    CryptoUnavailable,
    DecryptionError,
    DocumentError,
    EncryptionFailure,
    FormatError,
    InvalidInput,
    KDFParameterError,
    MalformedContainer,
    ReportVaultError,
    ResourceRevoked,
    ViewerStateError,
)
