"""
ECIES on secp256k1, wire-compatible with legacy eccrypto payloads.

Public API:
- ECIESEngine / create_engine: encrypt, decrypt, key normalization
- EncryptedPayload: the four payload fields
- serialize / deserialize: canonical hex wire format
- ECIESError and subclasses: closed error taxonomy
"""

from .codec import deserialize, serialize, serialize_bytes
from .constants import CIPHER, CURVE, FORMAT, KDF, MAC
from .engine import ECIESEngine, create_engine, generate_private_key
from .errors import (
    ERROR_CLASSES,
    DecryptionFailedError,
    ECIESError,
    ECIESErrorCode,
    EcdhFailedError,
    EncryptionFailedError,
    InvalidKeyError,
    MacMismatchError,
)
from .payload import EncryptedPayload, is_encrypted_payload

__all__ = [
    # Engine
    "ECIESEngine",
    "create_engine",
    "generate_private_key",
    # Data model and wire format
    "EncryptedPayload",
    "is_encrypted_payload",
    "serialize",
    "serialize_bytes",
    "deserialize",
    # Constants
    "CURVE",
    "CIPHER",
    "KDF",
    "MAC",
    "FORMAT",
    # Errors
    "ECIESError",
    "ECIESErrorCode",
    "ERROR_CLASSES",
    "InvalidKeyError",
    "EncryptionFailedError",
    "DecryptionFailedError",
    "MacMismatchError",
    "EcdhFailedError",
]
