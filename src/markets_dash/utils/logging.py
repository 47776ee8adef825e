"""Minimal logger helper to avoid duplicating setup."""

from __future__ import annotations

import logging
import re

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# httpx logs full request URLs, query string included
HTTP_LOGGERS = ("httpx", "httpcore")
_API_KEY_PATTERN = re.compile(r"(apikey=)[^&\s\"']+", re.IGNORECASE)


class RedactApiKeyFilter(logging.Filter):
    """Masks ``apikey=...`` query parameters in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _API_KEY_PATTERN.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def is_valid_level(level: str | int) -> bool:
    if isinstance(level, int):
        return True
    return isinstance(logging.getLevelName(level.upper()), int)


def install_redaction() -> None:
    for name in HTTP_LOGGERS:
        http_logger = logging.getLogger(name)
        if not any(isinstance(f, RedactApiKeyFilter) for f in http_logger.filters):
            http_logger.addFilter(RedactApiKeyFilter())


def get_logger(name: str, level: str | int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)
    for http_name in HTTP_LOGGERS:
        logging.getLogger(http_name).setLevel(logging.WARNING)
    install_redaction()
    return logger
