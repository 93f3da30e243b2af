"""
Crypto Primitive Contract

Abstract set of operations a platform backend must supply to the ECIES
engine. Backends hold no algorithmic logic beyond wrapping their library:
key derivation, encrypt-then-MAC and key normalization live in
protocols.ecies.engine.ECIESEngine.

Implementations: NativeSecp256k1Backend, SoftwareSecp256k1Backend

Author: ECIES Core Project
Date: October 2026
"""

import os
from abc import ABC, abstractmethod
from typing import Callable, Optional

RandomSource = Callable[[int], bytes]


class CryptoPrimitives(ABC):
    """
    Abstract interface for secp256k1 + AES-256-CBC + SHA-512/HMAC-SHA256 primitives.

    Every backend accepts an optional random source so that identical
    randomness can be injected into different backends (cross-backend parity
    tests). Defaults to os.urandom.
    """

    name: str = "abstract"

    def __init__(self, rng: Optional[RandomSource] = None):
        self._rng = rng or os.urandom

    def random_bytes(self, length: int) -> bytes:
        """
        Cryptographically secure random bytes.

        Raises:
            ValueError: If the random source returns the wrong number of bytes
        """
        data = self._rng(length)
        if len(data) != length:
            raise ValueError(f"Random source returned {len(data)} bytes, expected {length}")
        return bytes(data)

    @abstractmethod
    def is_valid_private_key(self, private_key: bytes) -> bool:
        """
        Check a 32 byte secp256k1 scalar (1 <= k < n).

        Returns:
            True if valid
        """
        pass

    @abstractmethod
    def derive_public_key(self, private_key: bytes, compressed: bool) -> Optional[bytes]:
        """
        Derive the public key of a private key.

        Args:
            private_key: 32 byte scalar
            compressed: 33 byte (0x02/0x03) or 65 byte (0x04) encoding

        Returns:
            Encoded public key, or None if derivation failed
        """
        pass

    @abstractmethod
    def is_valid_public_key(self, public_key: bytes) -> bool:
        """
        Check an SEC1 encoded public key lies on the curve.

        Only 33 byte 0x02/0x03 and 65 byte 0x04 encodings are valid. Hybrid
        (0x06/0x07) and raw 64 byte coordinates are not.
        """
        pass

    @abstractmethod
    def decompress_public_key(self, public_key: bytes) -> Optional[bytes]:
        """
        Convert a 33 byte compressed key to 65 byte uncompressed form.

        Returns:
            Uncompressed key, or None if decompression failed
        """
        pass

    @abstractmethod
    def ecdh_x_coordinate(self, public_key: bytes, private_key: bytes) -> bytes:
        """
        ECDH key agreement returning the RAW X coordinate of the shared point.

        This is not the hashed secret most libraries return from their ECDH
        helper; eccrypto compatibility depends on the raw coordinate.

        Returns:
            32 byte X coordinate

        Raises:
            EcdhFailedError: If the shared point cannot be computed
        """
        pass

    @abstractmethod
    def sha512(self, data: bytes) -> bytes:
        """SHA-512 digest (64 bytes)."""
        pass

    @abstractmethod
    def hmac_sha256(self, key: bytes, data: bytes) -> bytes:
        """HMAC-SHA256 tag (32 bytes)."""
        pass

    @abstractmethod
    def aes256cbc_encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        """AES-256-CBC with PKCS#7 padding."""
        pass

    @abstractmethod
    def aes256cbc_decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        """
        AES-256-CBC decryption with strict PKCS#7 unpadding.

        Raises:
            ValueError: On invalid padding (fail closed)
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
