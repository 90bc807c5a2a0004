"""Logging setup for the scanner service."""

import logging
import re
import sys
from datetime import datetime, timezone


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        base = f"{timestamp} {record.levelname:8} {record.name}: {record.getMessage()}"
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


class SecretRedactingFilter(logging.Filter):
    """Mask API keys and tokens that end up in log lines (quote URLs carry the token)."""

    PATTERNS = [
        re.compile(r"(token=)[^\s&'\"]+", re.IGNORECASE),
        re.compile(r"(api_key\s*[=:]\s*)[^\s,}\]]+", re.IGNORECASE),
        re.compile(r"(x-api-key['\"]?\s*[=:]\s*['\"]?)[^\s,'\"}\]]+", re.IGNORECASE),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern in self.PATTERNS:
            redacted = pattern.sub(r"\1[REDACTED]", redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(level: str = "INFO") -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(TextFormatter())
    handler.addFilter(SecretRedactingFilter())
    root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"scanner.{name}")
