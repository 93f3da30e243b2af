"""
ECIES Format Constants

Fixed numeric parameters of the eccrypto-compatible ECIES scheme.
Every value here is part of the wire contract: changing one breaks
interoperability with payloads already stored or in transit.

Scheme:
- Curve: secp256k1
- KDF: SHA-512(shared_x) -> encryption_key (32B) || mac_key (32B)
- Cipher: AES-256-CBC with PKCS#7 padding
- MAC: HMAC-SHA256(mac_key, iv || ephemeral_public_key || ciphertext)

Author: ECIES Core Project
Date: October 2026
"""

from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class CurvePrefix:
    """SEC1 point encoding prefixes."""
    UNCOMPRESSED: int = 0x04
    COMPRESSED_EVEN: int = 0x02
    COMPRESSED_ODD: int = 0x03


@dataclass(frozen=True)
class CurveConstants:
    """
    secp256k1 key sizes.

    Attributi:
        PRIVATE_KEY_LENGTH: Scalar size in bytes
        COMPRESSED_PUBLIC_KEY_LENGTH: 0x02/0x03 || X
        UNCOMPRESSED_PUBLIC_KEY_LENGTH: 0x04 || X || Y
        X_COORDINATE_OFFSET / X_COORDINATE_END: slice of X inside an encoded point
        ORDER: Group order n (valid scalars are 1..n-1)
    """
    PRIVATE_KEY_LENGTH: int = 32
    COMPRESSED_PUBLIC_KEY_LENGTH: int = 33
    UNCOMPRESSED_PUBLIC_KEY_LENGTH: int = 65
    COORDINATE_LENGTH: int = 32
    X_COORDINATE_OFFSET: int = 1
    X_COORDINATE_END: int = 33
    ORDER: int = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
    PREFIX: CurvePrefix = field(default_factory=CurvePrefix)

    @property
    def COMPRESSED_PREFIXES(self) -> FrozenSet[int]:
        return frozenset((self.PREFIX.COMPRESSED_EVEN, self.PREFIX.COMPRESSED_ODD))


@dataclass(frozen=True)
class CipherConstants:
    """AES-256-CBC with PKCS#7 padding."""
    IV_LENGTH: int = 16
    BLOCK_SIZE: int = 16


@dataclass(frozen=True)
class KDFConstants:
    """SHA-512 key expansion of the raw ECDH X coordinate."""
    OUTPUT_LENGTH: int = 64
    ENCRYPTION_KEY_OFFSET: int = 0
    ENCRYPTION_KEY_LENGTH: int = 32
    MAC_KEY_OFFSET: int = 32
    MAC_KEY_LENGTH: int = 32


@dataclass(frozen=True)
class MACConstants:
    """HMAC-SHA256 tag parameters."""
    LENGTH: int = 32


@dataclass(frozen=True)
class FormatConstants:
    """
    Wire layout: iv || ephemeral_public_key || ciphertext || mac

    Lengths are never prefixed; they are inferred from fixed offsets and the
    prefix byte of the ephemeral key.
    """
    IV_OFFSET: int = 0
    IV_LENGTH: int = 16
    EPHEMERAL_KEY_OFFSET: int = 16
    EPHEMERAL_KEY_LENGTH: int = 65
    CIPHERTEXT_OFFSET: int = 81
    MAC_LENGTH: int = 32

    # iv + prefix byte + mac + 1 ciphertext byte: checked before any offset is read
    MIN_ENCRYPTED_LENGTH: int = 16 + 1 + 32 + 1

    # iv + uncompressed key + mac + 1 ciphertext byte
    MIN_UNCOMPRESSED_LENGTH: int = 16 + 65 + 32 + 1


CURVE = CurveConstants()
CIPHER = CipherConstants()
KDF = KDFConstants()
MAC = MACConstants()
FORMAT = FormatConstants()
