"""
EncryptedPayload - the only transmitted ECIES entity.

Author: ECIES Core Project
Date: October 2026
"""

from dataclasses import dataclass
from typing import Any, Dict

from utils.encoding import from_hex, is_bytes_like, to_hex

_FIELDS = ("iv", "ephemeral_public_key", "ciphertext", "mac")

# eccrypto JSON field names used by legacy vectors and stored payloads
_LEGACY_FIELD_NAMES = {
    "iv": "iv",
    "ephemeral_public_key": "ephemPublicKey",
    "ciphertext": "ciphertext",
    "mac": "mac",
}


@dataclass(frozen=True)
class EncryptedPayload:
    """
    ECIES ciphertext bundle.

    Attributes:
        iv: 16 byte AES-CBC initialization vector
        ephemeral_public_key: 65 byte uncompressed key on the wire (0x04 || X || Y)
        ciphertext: AES-256-CBC output, positive multiple of 16
        mac: 32 byte HMAC-SHA256 over iv || ephemeral_public_key || ciphertext

    Fields are stored as immutable bytes; bytearray/memoryview inputs are copied.
    Length invariants are enforced by the codec and by ECIESEngine.decrypt,
    not here, so that malformed payloads can still be represented and rejected
    with a typed error.
    """

    iv: bytes
    ephemeral_public_key: bytes
    ciphertext: bytes
    mac: bytes

    def __post_init__(self):
        for name in _FIELDS:
            value = getattr(self, name)
            if not is_bytes_like(value):
                raise TypeError(f"{name} must be bytes, got {type(value).__name__}")
            if not isinstance(value, bytes):
                object.__setattr__(self, name, bytes(value))

    def to_dict(self) -> Dict[str, str]:
        """Hex fields using eccrypto names (iv, ephemPublicKey, ciphertext, mac)."""
        return {_LEGACY_FIELD_NAMES[name]: to_hex(getattr(self, name)) for name in _FIELDS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EncryptedPayload":
        """
        Build from a dict of hex strings (or bytes).

        Accepts both eccrypto names (ephemPublicKey) and snake_case names.

        Raises:
            ValueError: If a field is missing or not valid hex
        """
        values = {}
        for name in _FIELDS:
            legacy = _LEGACY_FIELD_NAMES[name]
            if legacy in data:
                raw = data[legacy]
            elif name in data:
                raw = data[name]
            else:
                raise ValueError(f"Missing field: {legacy}")
            values[name] = from_hex(raw) if isinstance(raw, str) else raw
        return cls(**values)

    @property
    def wire_length(self) -> int:
        """Total serialized size in bytes."""
        return len(self.iv) + len(self.ephemeral_public_key) + len(self.ciphertext) + len(self.mac)


def is_encrypted_payload(obj: Any) -> bool:
    """Structural type guard: all four fields present and bytes-like."""
    if isinstance(obj, EncryptedPayload):
        return True
    return all(is_bytes_like(getattr(obj, name, None)) for name in _FIELDS)
