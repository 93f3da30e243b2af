"""
Interfaces Package

Abstract contracts implemented by the platform backends.
"""

from .crypto_interfaces import CryptoPrimitives, RandomSource

__all__ = [
    "CryptoPrimitives",
    "RandomSource",
]
