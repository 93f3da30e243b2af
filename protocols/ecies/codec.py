"""
ECIES Wire Codec

Serializes EncryptedPayload to the legacy eccrypto layout and back:

    offset 0    : iv                    (16 bytes)
    offset 16   : ephemeral_public_key  (65 bytes, must start with 0x04)
    offset 81   : ciphertext            (variable, >= 1 byte)
    offset N-32 : mac                   (32 bytes)

Deserialization is layered: length check -> prefix check -> length check.
A truncated buffer never reaches the prefix byte, and a non-0x04 prefix
never reaches ECDH. Compressed prefixes (0x02/0x03) are rejected as well:
accepting them would let an attacker substitute the prefix and shift every
following offset.

Author: ECIES Core Project
Date: October 2026
"""

from typing import Union

from utils.encoding import BytesLike, from_hex, is_bytes_like, to_hex

from .constants import CIPHER, CURVE, FORMAT
from .errors import DecryptionFailedError
from .payload import EncryptedPayload


def _check_wire_fields(payload: EncryptedPayload) -> None:
    if len(payload.iv) != FORMAT.IV_LENGTH:
        raise DecryptionFailedError(
            f"Invalid IV length: expected {FORMAT.IV_LENGTH} bytes, got {len(payload.iv)}"
        )

    key = payload.ephemeral_public_key
    if len(key) != FORMAT.EPHEMERAL_KEY_LENGTH or key[0] != CURVE.PREFIX.UNCOMPRESSED:
        # 33 byte keys are accepted by decrypt in memory but never written out
        raise DecryptionFailedError(
            f"Cannot serialize ephemeral public key: expected {FORMAT.EPHEMERAL_KEY_LENGTH} bytes "
            f"with 0x{CURVE.PREFIX.UNCOMPRESSED:02x} prefix, got {len(key)} bytes"
        )

    if not payload.ciphertext or len(payload.ciphertext) % CIPHER.BLOCK_SIZE:
        raise DecryptionFailedError(
            f"Invalid ciphertext length: {len(payload.ciphertext)} bytes "
            f"(must be a positive multiple of {CIPHER.BLOCK_SIZE})"
        )

    if len(payload.mac) != FORMAT.MAC_LENGTH:
        raise DecryptionFailedError(
            f"Invalid MAC length: expected {FORMAT.MAC_LENGTH} bytes, got {len(payload.mac)}"
        )


def serialize_bytes(payload: EncryptedPayload) -> bytes:
    """
    iv || ephemeral_public_key || ciphertext || mac as raw bytes.

    Raises:
        DecryptionFailedError: A field does not fit the wire layout (wrong IV or
            MAC length, unaligned ciphertext, ephemeral key not 65 bytes 0x04)
    """
    _check_wire_fields(payload)
    return payload.iv + payload.ephemeral_public_key + payload.ciphertext + payload.mac


def serialize(payload: EncryptedPayload) -> str:
    """
    Serialize to canonical hex (lowercase, no 0x prefix).

    Example:
        >>> hex_payload = serialize(engine.encrypt(public_key, b"data"))
        >>> len(hex_payload) == 2 * (16 + 65 + 16 + 32)
        True
    """
    return to_hex(serialize_bytes(payload))


def deserialize(data: Union[str, BytesLike]) -> EncryptedPayload:
    """
    Parse a serialized payload.

    Args:
        data: Hex string (optional 0x prefix) or raw bytes

    Returns:
        EncryptedPayload with a 65 byte uncompressed ephemeral key

    Raises:
        DecryptionFailedError: Invalid hex, truncated data or bad key prefix
    """
    if isinstance(data, str):
        try:
            raw = from_hex(data)
        except ValueError as e:
            raise DecryptionFailedError(f"Invalid encrypted data encoding: {e}", cause=e) from e
    elif is_bytes_like(data):
        raw = bytes(data)
    else:
        raise DecryptionFailedError(
            f"Encrypted data must be a hex string or bytes, got {type(data).__name__}"
        )

    total = len(raw)

    # Bounds check before reading the prefix byte
    if total < FORMAT.MIN_ENCRYPTED_LENGTH:
        raise DecryptionFailedError(
            f"Encrypted data too short: {total} bytes "
            f"(minimum {FORMAT.MIN_ENCRYPTED_LENGTH} bytes)"
        )

    prefix = raw[FORMAT.EPHEMERAL_KEY_OFFSET]
    if prefix != CURVE.PREFIX.UNCOMPRESSED:
        raise DecryptionFailedError(
            f"Invalid ephemeral public key: expected 0x{CURVE.PREFIX.UNCOMPRESSED:02x} prefix "
            f"(uncompressed), got 0x{prefix:02x}"
        )

    if total < FORMAT.MIN_UNCOMPRESSED_LENGTH:
        raise DecryptionFailedError(
            f"Encrypted data too short: {total} bytes (minimum {FORMAT.MIN_UNCOMPRESSED_LENGTH} bytes "
            f"with uncompressed ephemeral key)"
        )

    mac_start = total - FORMAT.MAC_LENGTH

    return EncryptedPayload(
        iv=raw[FORMAT.IV_OFFSET:FORMAT.IV_OFFSET + FORMAT.IV_LENGTH],
        ephemeral_public_key=raw[FORMAT.EPHEMERAL_KEY_OFFSET:FORMAT.CIPHERTEXT_OFFSET],
        ciphertext=raw[FORMAT.CIPHERTEXT_OFFSET:mac_start],
        mac=raw[mac_start:],
    )
