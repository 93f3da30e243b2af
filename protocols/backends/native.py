"""
Native ECIES backend.

Curve operations go through libsecp256k1 (coincurve bindings); AES-256-CBC,
SHA-512 and HMAC-SHA256 go through OpenSSL (cryptography).

Author: ECIES Core Project
Date: October 2026
"""

from typing import Optional

from coincurve import PrivateKey, PublicKey
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, hmac, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from interfaces.crypto_interfaces import CryptoPrimitives, RandomSource
from protocols.ecies.constants import CIPHER, CURVE
from protocols.ecies.errors import EcdhFailedError


def _has_valid_encoding(public_key: bytes) -> bool:
    """
    Length/prefix pre-check.

    libsecp256k1 also parses hybrid (0x06/0x07) encodings, which eccrypto
    never produces, so they are filtered out before parsing.
    """
    if len(public_key) == CURVE.COMPRESSED_PUBLIC_KEY_LENGTH:
        return public_key[0] in CURVE.COMPRESSED_PREFIXES
    if len(public_key) == CURVE.UNCOMPRESSED_PUBLIC_KEY_LENGTH:
        return public_key[0] == CURVE.PREFIX.UNCOMPRESSED
    return False


class NativeSecp256k1Backend(CryptoPrimitives):
    """
    libsecp256k1 + OpenSSL primitives.

    Example:
        >>> backend = NativeSecp256k1Backend()
        >>> sk = backend.random_bytes(32)
        >>> len(backend.derive_public_key(sk, compressed=False))
        65
    """

    name = "native"

    def __init__(self, rng: Optional[RandomSource] = None):
        super().__init__(rng)

    # ------------------------------------------------------------------
    # secp256k1
    # ------------------------------------------------------------------

    def is_valid_private_key(self, private_key: bytes) -> bool:
        if len(private_key) != CURVE.PRIVATE_KEY_LENGTH:
            return False
        try:
            PrivateKey(bytes(private_key))
            return True
        except ValueError:
            return False

    def derive_public_key(self, private_key: bytes, compressed: bool) -> Optional[bytes]:
        if not self.is_valid_private_key(private_key):
            return None
        try:
            return PrivateKey(bytes(private_key)).public_key.format(compressed=compressed)
        except ValueError:
            return None

    def is_valid_public_key(self, public_key: bytes) -> bool:
        if not _has_valid_encoding(public_key):
            return False
        try:
            PublicKey(bytes(public_key))
            return True
        except ValueError:
            return False

    def decompress_public_key(self, public_key: bytes) -> Optional[bytes]:
        if len(public_key) != CURVE.COMPRESSED_PUBLIC_KEY_LENGTH or not _has_valid_encoding(public_key):
            return None
        try:
            return PublicKey(bytes(public_key)).format(compressed=False)
        except ValueError:
            return None

    def ecdh_x_coordinate(self, public_key: bytes, private_key: bytes) -> bytes:
        # PrivateKey.ecdh() returns sha256(compressed point); eccrypto uses the raw X
        try:
            shared_point = PublicKey(bytes(public_key)).multiply(bytes(private_key))
        except ValueError as e:
            raise EcdhFailedError(f"ECDH computation failed: {e}", cause=e) from e
        return shared_point.format(compressed=True)[CURVE.X_COORDINATE_OFFSET:CURVE.X_COORDINATE_END]

    # ------------------------------------------------------------------
    # Hashing
    # ------------------------------------------------------------------

    def sha512(self, data: bytes) -> bytes:
        digest = hashes.Hash(hashes.SHA512(), backend=default_backend())
        digest.update(bytes(data))
        return digest.finalize()

    def hmac_sha256(self, key: bytes, data: bytes) -> bytes:
        h = hmac.HMAC(bytes(key), hashes.SHA256(), backend=default_backend())
        h.update(bytes(data))
        return h.finalize()

    # ------------------------------------------------------------------
    # AES-256-CBC
    # ------------------------------------------------------------------

    def aes256cbc_encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        padder = padding.PKCS7(CIPHER.BLOCK_SIZE * 8).padder()
        padded = padder.update(bytes(plaintext)) + padder.finalize()

        encryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(bytes(iv)), backend=default_backend()).encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def aes256cbc_decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        decryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(bytes(iv)), backend=default_backend()).decryptor()
        padded = decryptor.update(bytes(ciphertext)) + decryptor.finalize()

        # Raises ValueError("Invalid padding bytes.") on bad padding
        unpadder = padding.PKCS7(CIPHER.BLOCK_SIZE * 8).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
