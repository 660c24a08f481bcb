"""
Centralized logging configuration for the quickconvert service.

This module provides:
- Consistent root logger setup for the app and the engine
- Environment-based configuration (level, format, optional log file)
- A small decorator for timing conversion steps
"""

import logging
import logging.handlers
import os
import sys
import time
from functools import wraps
from pathlib import Path
from typing import Dict, Optional, Union


# ===== LOGGING CONFIGURATION =====

LEVEL_NAMES = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'WARN': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
    'FATAL': logging.CRITICAL,
}


def level_from_string(level_str: str) -> int:
    """Convert string log level to integer."""
    return LEVEL_NAMES.get(level_str.strip().upper(), logging.INFO)


class LogConfig:
    """Logging settings read from the environment."""

    DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DEV_FORMAT = '%(asctime)s [%(levelname)8s] %(name)s:%(lineno)d - %(message)s'
    JSON_FORMAT = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'

    @staticmethod
    def get_log_level() -> int:
        """Get log level from environment, WARNING under pytest, INFO otherwise."""
        level_str = os.getenv('LOG_LEVEL', os.getenv('LOGLEVEL'))
        if level_str:
            return level_from_string(level_str)

        if 'pytest' in sys.modules or 'PYTEST_CURRENT_TEST' in os.environ:
            return logging.WARNING

        return logging.INFO

    @staticmethod
    def get_log_format(format_type: Optional[str] = None) -> str:
        format_type = (format_type or os.getenv('LOG_FORMAT', 'standard')).lower()

        if format_type in ('dev', 'development'):
            return LogConfig.DEV_FORMAT
        elif format_type == 'json':
            return LogConfig.JSON_FORMAT
        return LogConfig.DEFAULT_FORMAT

    @staticmethod
    def should_log_to_file() -> bool:
        return os.getenv('LOG_TO_FILE', 'false').lower() in ('true', '1', 'yes')

    @staticmethod
    def get_log_file_path() -> Optional[Path]:
        log_file = os.getenv('LOG_FILE')
        return Path(log_file) if log_file else None


# ===== LOGGER FACTORY =====

class LoggerFactory:
    """Configures the root logger once and hands out named loggers."""

    _loggers: Dict[str, logging.Logger] = {}
    _configured = False

    @classmethod
    def configure_logging(cls, level: Optional[int] = None,
                          format_str: Optional[str] = None,
                          log_to_file: bool = False,
                          log_file: Optional[Union[str, Path]] = None) -> None:
        """Configure the root logger with consistent settings."""
        if cls._configured:
            return

        log_level = level or LogConfig.get_log_level()
        formatter = logging.Formatter(format_str or LogConfig.get_log_format())
        log_file_path = Path(log_file) if log_file else LogConfig.get_log_file_path()

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if (log_to_file or LogConfig.should_log_to_file()) and log_file_path:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file_path,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if name not in cls._loggers:
            cls.configure_logging()
            cls._loggers[name] = logging.getLogger(name)
        return cls._loggers[name]


# ===== UTILITY FUNCTIONS =====

def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Convenience function to get a configured logger."""
    return LoggerFactory.get_logger(name or "quickconvert")


def setup_logging(level: Optional[Union[str, int]] = None,
                  format_type: Optional[str] = None,
                  log_to_file: bool = False,
                  log_file: Optional[Union[str, Path]] = None) -> None:
    """Setup logging with the given configuration."""
    if isinstance(level, str):
        level = level_from_string(level)

    LoggerFactory.configure_logging(
        level=level,
        format_str=LogConfig.get_log_format(format_type),
        log_to_file=log_to_file,
        log_file=log_file
    )


def log_performance(logger: logging.Logger, level: int = logging.INFO):
    """Decorator to log how long a conversion step took."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.log(level, f"Failed {func.__name__} after {time.perf_counter() - start:.3f}s: {e}")
                raise
            logger.log(level, f"Completed {func.__name__} in {time.perf_counter() - start:.3f}s")
            return result
        return wrapper
    return decorator
