"""
Hex/bytes conversion helpers shared by the codec, the wallet service and the CLI.

Canonical transport encoding is lowercase hex without a `0x` prefix;
decoders also accept the prefixed form.
"""

import binascii
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def is_bytes_like(value) -> bool:
    """True for bytes, bytearray and memoryview."""
    return isinstance(value, (bytes, bytearray, memoryview))


def strip_hex_prefix(value: str) -> str:
    """Remove an optional 0x/0X prefix."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def to_hex(data: BytesLike) -> str:
    """Lowercase hex, no prefix."""
    return bytes(data).hex()


def from_hex(value: str) -> bytes:
    """
    Decode a hex string with or without `0x` prefix.

    Raises:
        ValueError: If the string is not valid hex (odd length or bad digit)
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected hex string, got {type(value).__name__}")
    try:
        return binascii.unhexlify(strip_hex_prefix(value.strip()))
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid hex string: {e}") from e


def ensure_bytes(value: Union[str, BytesLike]) -> bytes:
    """Accept hex string or bytes-like, return bytes."""
    if isinstance(value, str):
        return from_hex(value)
    if is_bytes_like(value):
        return bytes(value)
    raise ValueError(f"Expected hex string or bytes, got {type(value).__name__}")
