"""
ECIES Platform Backends

Two interchangeable implementations of the crypto primitive contract:
- native: libsecp256k1 (coincurve) + OpenSSL (cryptography)
- software: python-ecdsa + pyaes

Both must produce byte-identical payloads for identical randomness.
"""

from typing import List, Optional

from interfaces.crypto_interfaces import CryptoPrimitives, RandomSource

from .native import NativeSecp256k1Backend
from .software import SoftwareSecp256k1Backend

_ALIASES = {
    "native": NativeSecp256k1Backend,
    "coincurve": NativeSecp256k1Backend,
    "libsecp256k1": NativeSecp256k1Backend,
    "software": SoftwareSecp256k1Backend,
    "pure": SoftwareSecp256k1Backend,
    "ecdsa": SoftwareSecp256k1Backend,
}


def get_backend(name: str, rng: Optional[RandomSource] = None) -> CryptoPrimitives:
    """
    Resolve a backend by name.

    Raises:
        ValueError: Unknown backend name
    """
    n = name.strip().lower()
    backend_cls = _ALIASES.get(n)
    if backend_cls is None:
        raise ValueError(f"unknown ecies backend: {name}")
    return backend_cls(rng=rng)


def available_backends() -> List[str]:
    """Canonical backend names."""
    return [NativeSecp256k1Backend.name, SoftwareSecp256k1Backend.name]


__all__ = [
    "NativeSecp256k1Backend",
    "SoftwareSecp256k1Backend",
    "get_backend",
    "available_backends",
]
