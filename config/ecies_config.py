"""
ECIES Configuration - centralized runtime settings

Defaults live in a frozen dataclass; deployments override them through
environment variables read by load_settings().

Usage:
    from config.ecies_config import load_settings

    settings = load_settings()
    engine = create_engine(settings=settings)

Environment:
    ECIES_BACKEND       native | software        (default: native)
    ECIES_CACHE_SIZE    validation cache entries (default: 256, 0 disables)
    ECIES_LOG_LEVEL     DEBUG | INFO | WARNING   (default: WARNING)
    ECIES_LOG_DIR       directory for log files  (default: none)
    ECIES_METRICS       1/0, true/false          (default: 1)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class ECIESSettings:
    """
    Runtime settings for the engine and its ambient services.

    Attributi:
        backend: Default primitive backend name
        validation_cache_size: Max entries of the per-engine public key cache
        log_level: Level for ECIESLogger loggers
        log_dir: Optional directory for log files
        metrics_enabled: Record operations in the global MetricsCollector
        metrics_max_samples: FIFO size of the collector
    """
    backend: str = "native"
    validation_cache_size: int = 256
    log_level: str = "WARNING"
    log_dir: Optional[str] = None
    metrics_enabled: bool = True
    metrics_max_samples: int = 10000


# Istanza singleton globale (defaults, no environment)
ECIES_SETTINGS = ECIESSettings()


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        parsed = int(value.strip())
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e
    if parsed < 0:
        raise ValueError(f"{name} must be >= 0, got {parsed}")
    return parsed


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ECIESSettings:
    """
    Build settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (tests)

    Returns:
        ECIESSettings with overrides applied

    Raises:
        ValueError: If a variable has an invalid value
    """
    env = os.environ if environ is None else environ
    defaults = ECIES_SETTINGS

    backend = env.get("ECIES_BACKEND", defaults.backend).strip().lower()
    if not backend:
        raise ValueError("ECIES_BACKEND must not be empty")

    cache_size = defaults.validation_cache_size
    if env.get("ECIES_CACHE_SIZE"):
        cache_size = _parse_int("ECIES_CACHE_SIZE", env["ECIES_CACHE_SIZE"])

    metrics_enabled = defaults.metrics_enabled
    if env.get("ECIES_METRICS"):
        metrics_enabled = _parse_bool("ECIES_METRICS", env["ECIES_METRICS"])

    return ECIESSettings(
        backend=backend,
        validation_cache_size=cache_size,
        log_level=env.get("ECIES_LOG_LEVEL", defaults.log_level).strip().upper(),
        log_dir=env.get("ECIES_LOG_DIR") or defaults.log_dir,
        metrics_enabled=metrics_enabled,
        metrics_max_samples=defaults.metrics_max_samples,
    )
