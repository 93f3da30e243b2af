"""
ECIES Protocol Implementations

Module Structure:
- ecies/: engine, payload data model, wire codec, constants and errors
- backends/: native (libsecp256k1 + OpenSSL) and software (python-ecdsa + pyaes) primitives

Author: ECIES Core Project
Date: October 2026
"""

__version__ = "1.0.0"

from .ecies import (
    ECIESEngine,
    ECIESError,
    EncryptedPayload,
    create_engine,
    deserialize,
    serialize,
)
from .backends import available_backends, get_backend

__all__ = [
    "ECIESEngine",
    "ECIESError",
    "EncryptedPayload",
    "create_engine",
    "deserialize",
    "serialize",
    "available_backends",
    "get_backend",
]
