"""
ECIES Error Taxonomy

Closed set of error types raised by the engine, the wire codec and the
platform backends. Each class carries a distinct ECIESErrorCode so callers
can branch programmatically without inspecting message text.

Author: ECIES Core Project
Date: October 2026
"""

from enum import Enum
from typing import Optional


class ECIESErrorCode(Enum):
    """Programmatic error codes."""

    INVALID_KEY = "INVALID_KEY"
    ENCRYPTION_FAILED = "ENCRYPTION_FAILED"
    DECRYPTION_FAILED = "DECRYPTION_FAILED"
    MAC_MISMATCH = "MAC_MISMATCH"
    ECDH_FAILED = "ECDH_FAILED"


class ECIESError(Exception):
    """
    Base class for every ECIES failure.

    Args:
        message: Human readable description
        cause: Underlying exception, if any (also set as __cause__ by `raise ... from`)
    """

    code: ECIESErrorCode

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value}, message={self.message!r})"


class InvalidKeyError(ECIESError):
    """Wrong length, bad prefix or off-curve key."""

    code = ECIESErrorCode.INVALID_KEY


class EncryptionFailedError(ECIESError):
    """Ephemeral key generation or cipher failure."""

    code = ECIESErrorCode.ENCRYPTION_FAILED


class DecryptionFailedError(ECIESError):
    """Malformed payload, padding failure or any non-MAC decryption fault."""

    code = ECIESErrorCode.DECRYPTION_FAILED


class MacMismatchError(ECIESError):
    """Authentication failure: tampering or wrong key. Never retried."""

    code = ECIESErrorCode.MAC_MISMATCH


class EcdhFailedError(ECIESError):
    """Shared secret computation failure (e.g. point at infinity)."""

    code = ECIESErrorCode.ECDH_FAILED


ERROR_CLASSES = {
    cls.code: cls
    for cls in (
        InvalidKeyError,
        EncryptionFailedError,
        DecryptionFailedError,
        MacMismatchError,
        EcdhFailedError,
    )
}
