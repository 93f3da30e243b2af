"""
Independent eccrypto-style reference implementation.

Built only on `cryptography` (OpenSSL) and the standard library, sharing no
code with the engine or its backends. It reproduces the legacy eccrypto
algorithm step by step so that interoperability is checked against a second
implementation rather than against the engine itself:

    shared_x   = X coordinate of ECDH(ephemeral_sk, recipient_pk)   (not hashed)
    digest     = SHA-512(shared_x)
    enc_key    = digest[0:32]
    mac_key    = digest[32:64]
    ciphertext = AES-256-CBC(enc_key, iv, PKCS#7(message))
    mac        = HMAC-SHA256(mac_key, iv || ephemeral_pk || ciphertext)
    wire       = iv || ephemeral_pk || ciphertext || mac
"""

import hashlib
import hmac
import os

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

CURVE = ec.SECP256K1()


def _private_key(private_key: bytes) -> ec.EllipticCurvePrivateKey:
    return ec.derive_private_key(int.from_bytes(private_key, "big"), CURVE, default_backend())


def public_key_for(private_key: bytes, compressed: bool = False) -> bytes:
    fmt = PublicFormat.CompressedPoint if compressed else PublicFormat.UncompressedPoint
    return _private_key(private_key).public_key().public_bytes(Encoding.X962, fmt)


def shared_x(private_key: bytes, public_key: bytes) -> bytes:
    """Raw 32 byte X coordinate (OpenSSL ECDH output)."""
    peer = ec.EllipticCurvePublicKey.from_encoded_point(CURVE, public_key)
    return _private_key(private_key).exchange(ec.ECDH(), peer)


def _keys(x: bytes):
    digest = hashlib.sha512(x).digest()
    return digest[:32], digest[32:]


def legacy_encrypt_fields(
    public_key: bytes,
    message: bytes,
    ephemeral_private_key: bytes = None,
    iv: bytes = None,
    pad: bool = True,
    compressed_ephemeral: bool = False,
):
    """
    Encrypt like eccrypto; returns (iv, ephemeral_public_key, ciphertext, mac).

    pad=False encrypts `message` as-is (it must be block aligned), which lets
    tests build authenticated payloads with invalid padding.
    compressed_ephemeral=True emits a 33 byte ephemeral key, MAC'd as sent.
    """
    if ephemeral_private_key is None:
        ephemeral_private_key = os.urandom(32)
    if iv is None:
        iv = os.urandom(16)

    ephemeral_public_key = public_key_for(ephemeral_private_key, compressed=compressed_ephemeral)
    enc_key, mac_key = _keys(shared_x(ephemeral_private_key, public_key))

    if pad:
        padder = padding.PKCS7(128).padder()
        message = padder.update(message) + padder.finalize()
    encryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv), backend=default_backend()).encryptor()
    ciphertext = encryptor.update(message) + encryptor.finalize()

    mac = hmac.new(mac_key, iv + ephemeral_public_key + ciphertext, hashlib.sha256).digest()
    return iv, ephemeral_public_key, ciphertext, mac


def legacy_encrypt(public_key: bytes, message: bytes, ephemeral_private_key: bytes = None, iv: bytes = None) -> bytes:
    """Encrypt like eccrypto; returns the concatenated wire bytes."""
    return b"".join(legacy_encrypt_fields(public_key, message, ephemeral_private_key, iv))


def legacy_decrypt(private_key: bytes, wire: bytes) -> bytes:
    """Decrypt eccrypto wire bytes (uncompressed ephemeral key only)."""
    iv = wire[:16]
    ephemeral_public_key = wire[16:81]
    ciphertext = wire[81:-32]
    mac = wire[-32:]

    enc_key, mac_key = _keys(shared_x(private_key, ephemeral_public_key))
    expected = hmac.new(mac_key, iv + ephemeral_public_key + ciphertext, hashlib.sha256).digest()
    if not hmac.compare_digest(expected, mac):
        raise ValueError("Bad MAC")

    decryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv), backend=default_backend()).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(128).unpadder()
    return unpadder.update(padded) + unpadder.finalize()
