"""Logging configuration for Disk Harvester.

Provides centralized logging with secret redaction to ensure SAS tokens
and account keys are never written to the console or log files.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional


# Secret patterns to redact from logs
SECRET_PATTERNS = [
    # SAS signature query parameter
    (re.compile(r'(sig=)[^&\s"\']+', re.IGNORECASE), r'\1[REDACTED]'),
    # Storage account keys in connection strings
    (re.compile(r'(AccountKey=)[^;\s"\']+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(SharedAccessSignature=)[^;\s"\']+', re.IGNORECASE), r'\1[REDACTED]'),
    # Authorization headers
    (re.compile(r'(Bearer\s+)[A-Za-z0-9\-._~+/]+=*', re.IGNORECASE), r'\1[REDACTED]'),
]


def redact(message: str) -> str:
    """Remove secrets from a message."""
    for pattern, replacement in SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class SecretRedactingFormatter(logging.Formatter):
    """Custom formatter that redacts secrets from log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting any secrets."""
        return redact(super().format(record))


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Configure application logging with secret redaction.

    Args:
        level: Console logging level (default INFO)
        log_file: Optional file path for log output
        console: Whether to output to console (default True)
        file_level: Logging level for the log file (default DEBUG)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("disk_harvester")
    logger.setLevel(min(level, file_level) if log_file else level)

    # Clear any existing handlers
    logger.handlers.clear()

    formatter = SecretRedactingFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Console handler
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8", errors="backslashreplace")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # The storage SDK logs every request at INFO
    logging.getLogger("azure").setLevel(logging.WARNING)

    return logger

