"""
ECIES Services Package

Service layer over the ECIES engine.
"""

from .wallet_key_service import (
    WalletKeyEncryptionService,
    process_wallet_private_key,
    process_wallet_public_key,
)

__all__ = [
    'WalletKeyEncryptionService',
    'process_wallet_public_key',
    'process_wallet_private_key',
]
