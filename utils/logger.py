"""
Centralized logger for the ECIES engine, backends and tools.

Named loggers with console and optional file output and a consistent format.
Key material, plaintext and derived secrets are never passed to a logger.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Union

LOG_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


class ECIESLogger:
    """
    Cached, preconfigured loggers.

    Loggers do not propagate to the root logger, so configuring one here
    never duplicates output through the application's handlers.
    """

    _loggers: Dict[str, logging.Logger] = {}

    @staticmethod
    def get_logger(
        name: str,
        log_dir: Optional[str] = None,
        level: Union[int, str] = logging.INFO,
        console_output: bool = True,
    ) -> logging.Logger:
        """
        Get or create a configured logger.

        Args:
            name: Logger name (e.g. "ECIESEngine", "ecies-tool")
            log_dir: Directory for <name>.log (optional)
            level: Minimum level, int or name ("DEBUG", "INFO", ...)
            console_output: Also log to stderr

        Returns:
            Configured logger (cached by name)
        """
        if name in ECIESLogger._loggers:
            return ECIESLogger._loggers[name]

        level = _coerce_level(level)
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        logger.handlers.clear()

        # [2026-10-19 14:30:45] [ECIESEngine] [WARNING] MAC verification failed
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path / f"{name}.log", encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        if not logger.handlers:
            logger.addHandler(logging.NullHandler())

        ECIESLogger._loggers[name] = logger
        return logger

    @staticmethod
    def set_level(name: str, level: Union[int, str]):
        """Changes log level for an existing logger."""
        if name in ECIESLogger._loggers:
            level = _coerce_level(level)
            logger = ECIESLogger._loggers[name]
            logger.setLevel(level)
            for handler in logger.handlers:
                handler.setLevel(level)

    @staticmethod
    def clear_cache():
        """Clears logger cache."""
        for logger in ECIESLogger._loggers.values():
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        ECIESLogger._loggers.clear()
