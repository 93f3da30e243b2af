"""
Utils Package

Contains utility modules for encoding, logging, monitoring, key caching and
secret scrubbing.
"""

from .encoding import ensure_bytes, from_hex, is_bytes_like, to_hex
from .key_cache import PublicKeyValidationCache
from .logger import ECIESLogger
from .metrics import MetricsCollector, get_metrics_collector, reset_metrics_collector
from .zeroize import wipe, wipe_all

__all__ = [
    # Encoding
    "ensure_bytes",
    "from_hex",
    "is_bytes_like",
    "to_hex",
    # Key cache
    "PublicKeyValidationCache",
    # Logging
    "ECIESLogger",
    # Metrics
    "MetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
    # Secret scrubbing
    "wipe",
    "wipe_all",
]
