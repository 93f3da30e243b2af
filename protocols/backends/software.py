"""
Pure-software ECIES backend.

Curve arithmetic comes from python-ecdsa, AES-256-CBC from pyaes and the
hashes from hashlib/hmac. Slower than the native backend but free of
compiled dependencies; output is byte-identical given the same randomness.

Author: ECIES Core Project
Date: October 2026
"""

import hashlib
import hmac
from typing import Optional

import pyaes
from ecdsa import ECDH, SECP256k1, SigningKey, VerifyingKey

from interfaces.crypto_interfaces import CryptoPrimitives, RandomSource
from protocols.ecies.constants import CIPHER, CURVE
from protocols.ecies.errors import EcdhFailedError


def _strip_pkcs7(data: bytes, block_size: int = CIPHER.BLOCK_SIZE) -> bytes:
    """Strict PKCS#7 removal; pyaes' own unpadding accepts a zero pad byte."""
    if not data or len(data) % block_size:
        raise ValueError("Invalid padded data length")
    pad = data[-1]
    if pad < 1 or pad > block_size or data[-pad:] != bytes([pad]) * pad:
        raise ValueError("Invalid padding bytes.")
    return data[:-pad]


class SoftwareSecp256k1Backend(CryptoPrimitives):
    """python-ecdsa + pyaes primitives."""

    name = "software"

    def __init__(self, rng: Optional[RandomSource] = None):
        super().__init__(rng)
        self._curve = SECP256k1

    def _encoding_ok(self, public_key: bytes) -> bool:
        # python-ecdsa also accepts raw 64 byte and hybrid encodings
        if len(public_key) == CURVE.COMPRESSED_PUBLIC_KEY_LENGTH:
            return public_key[0] in CURVE.COMPRESSED_PREFIXES
        if len(public_key) == CURVE.UNCOMPRESSED_PUBLIC_KEY_LENGTH:
            return public_key[0] == CURVE.PREFIX.UNCOMPRESSED
        return False

    def _signing_key(self, private_key: bytes) -> Optional[SigningKey]:
        if len(private_key) != CURVE.PRIVATE_KEY_LENGTH:
            return None
        if not 0 < int.from_bytes(private_key, "big") < CURVE.ORDER:
            return None
        try:
            return SigningKey.from_string(bytes(private_key), curve=self._curve)
        except Exception:
            return None

    def is_valid_private_key(self, private_key: bytes) -> bool:
        return self._signing_key(private_key) is not None

    def derive_public_key(self, private_key: bytes, compressed: bool) -> Optional[bytes]:
        signing_key = self._signing_key(private_key)
        if signing_key is None:
            return None
        encoding = "compressed" if compressed else "uncompressed"
        return signing_key.get_verifying_key().to_string(encoding)

    def is_valid_public_key(self, public_key: bytes) -> bool:
        if not self._encoding_ok(public_key):
            return False
        try:
            VerifyingKey.from_string(bytes(public_key), curve=self._curve)
            return True
        except Exception:
            return False

    def decompress_public_key(self, public_key: bytes) -> Optional[bytes]:
        if len(public_key) != CURVE.COMPRESSED_PUBLIC_KEY_LENGTH or not self._encoding_ok(public_key):
            return None
        try:
            return VerifyingKey.from_string(bytes(public_key), curve=self._curve).to_string("uncompressed")
        except Exception:
            return None

    def ecdh_x_coordinate(self, public_key: bytes, private_key: bytes) -> bytes:
        # generate_sharedsecret_bytes() is the raw X coordinate, not a hash
        try:
            ecdh = ECDH(curve=self._curve)
            ecdh.load_private_key_bytes(bytes(private_key))
            ecdh.load_received_public_key_bytes(bytes(public_key))
            shared_x = ecdh.generate_sharedsecret_bytes()
        except Exception as e:
            raise EcdhFailedError(f"ECDH computation failed: {e}", cause=e) from e
        if len(shared_x) != CURVE.COORDINATE_LENGTH:
            raise EcdhFailedError(f"ECDH returned {len(shared_x)} bytes, expected {CURVE.COORDINATE_LENGTH}")
        return shared_x

    def sha512(self, data: bytes) -> bytes:
        return hashlib.sha512(bytes(data)).digest()

    def hmac_sha256(self, key: bytes, data: bytes) -> bytes:
        return hmac.new(bytes(key), bytes(data), hashlib.sha256).digest()

    def aes256cbc_encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        # Encrypter applies PKCS#7 by default
        encrypter = pyaes.Encrypter(pyaes.AESModeOfOperationCBC(bytes(key), iv=bytes(iv)))
        ciphertext = encrypter.feed(bytes(plaintext))
        ciphertext += encrypter.feed()
        return ciphertext

    def aes256cbc_decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        if not ciphertext or len(ciphertext) % CIPHER.BLOCK_SIZE:
            raise ValueError("Ciphertext length must be a positive multiple of the block size")
        decrypter = pyaes.Decrypter(
            pyaes.AESModeOfOperationCBC(bytes(key), iv=bytes(iv)),
            padding=pyaes.PADDING_NONE,
        )
        padded = decrypter.feed(bytes(ciphertext))
        padded += decrypter.feed()
        return _strip_pkcs7(padded)
