"""Utility helpers."""

from .errors import (
    ConfigError,
    DataError,
    DataRetrievalError,
    MarketsDashError,
    NetworkError,
    describe_error,
)
from .logging import get_logger, install_redaction, is_valid_level

__all__ = [
    "ConfigError",
    "DataError",
    "DataRetrievalError",
    "MarketsDashError",
    "NetworkError",
    "describe_error",
    "get_logger",
    "install_redaction",
    "is_valid_level",
]
