"""
ECIES Configuration Package

Centralizza le impostazioni runtime del motore ECIES.
"""

from .ecies_config import (
    ECIES_SETTINGS,
    ECIESSettings,
    load_settings,
)

__all__ = [
    'ECIES_SETTINGS',
    'ECIESSettings',
    'load_settings',
]
