"""Logging configuration for Drag Timer.

This module provides centralized logging configuration
for the entire application.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Any, Optional

# Global logging configuration storage
_logging_config: dict[str, Any] = {}


def _store_logging_config(config: dict[str, Any]) -> None:
    """Store logging configuration for global access."""
    _logging_config.update(config)


class StructuredFormatter(logging.Formatter):
    """Formatter that masks secrets and shortens free-text fields."""

    def __init__(self, fmt=None, datefmt=None, redact_sensitive=True):
        super().__init__(fmt, datefmt)
        self.redact_sensitive = redact_sensitive
        self.sensitive_patterns = [
            (
                re.compile(r"(password|token|secret|api_key|auth|credential)=[^\s|]+", re.IGNORECASE),
                r"\1=[REDACTED]",
            ),
            (re.compile(r"(notes|title)=([^|]+)", re.IGNORECASE), self._redact_long_text),
        ]

    def _redact_long_text(self, match):
        key = match.group(1)
        value = match.group(2).strip()
        if len(value) > 50:
            return f"{key}={value[:20]}...{value[-10:]} (len={len(value)})"
        return match.group(0)

    def format(self, record):
        formatted = super().format(record)

        if self.redact_sensitive:
            for pattern, replacement in self.sensitive_patterns:
                formatted = pattern.sub(replacement, formatted)

        return formatted


def _setup_trace_level() -> None:
    """Register a TRACE level below DEBUG, once."""
    if not hasattr(logging, "TRACE"):
        logging.TRACE = 5
        logging.addLevelName(logging.TRACE, "TRACE")

        def trace(self, message, *args, **kwargs):
            if self.isEnabledFor(logging.TRACE):
                self._log(logging.TRACE, message, args, **kwargs)

        logging.Logger.trace = trace


def _get_logging_level(verbosity: int) -> int:
    if verbosity == 1:
        return logging.INFO
    elif verbosity == 2:
        return logging.DEBUG
    elif verbosity >= 3:
        return logging.TRACE
    else:
        return logging.WARNING


def _create_formatters(enable_structured: bool, redact_sensitive: bool) -> tuple:
    detailed_fmt = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
    simple_fmt = "%(asctime)s - %(filename)s:%(lineno)d - %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    if enable_structured:
        return (
            StructuredFormatter(fmt=detailed_fmt, datefmt=datefmt, redact_sensitive=redact_sensitive),
            StructuredFormatter(fmt=simple_fmt, datefmt=datefmt, redact_sensitive=redact_sensitive),
        )
    return logging.Formatter(fmt=detailed_fmt, datefmt=datefmt), logging.Formatter(fmt=simple_fmt, datefmt=datefmt)


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    enable_structured_logging: bool = True,
    redact_sensitive_data: bool = True,
) -> None:
    """Setup logging configuration for the application.

    Args:
        verbosity: Logging verbosity level (0=WARNING, 1=INFO, 2=DEBUG, 3=TRACE)
        log_file: Optional path to log file. If None, no file logging.
        log_to_console: Whether to log to console (default: True)
        enable_structured_logging: Whether to use the redacting formatter
        redact_sensitive_data: Whether to redact sensitive data in logs
    """
    _setup_trace_level()
    logging_level = _get_logging_level(verbosity)

    _store_logging_config({
        "verbosity": verbosity,
        "enable_structured_logging": enable_structured_logging,
        "redact_sensitive_data": redact_sensitive_data,
        "log_file": log_file,
        "log_to_console": log_to_console,
    })

    detailed_formatter, simple_formatter = _create_formatters(enable_structured_logging, redact_sensitive_data)

    handlers = []

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging_level)
        console_handler.setFormatter(simple_formatter)
        handlers.append(console_handler)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_handler.setFormatter(detailed_formatter)
            handlers.append(file_handler)
        except Exception as e:
            print(f"Warning: Could not setup file logging to {log_file}: {e}", file=sys.stderr)

    logging.basicConfig(
        level=logging_level,
        handlers=handlers,
        force=True,
    )

    logging.captureWarnings(capture=True)

    _configure_third_party_loggers()

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured - Level: {logging.getLevelName(logging_level)}")
    if log_file:
        logger.info(f"File logging enabled: {log_file}")


def _configure_third_party_loggers() -> None:
    """Configure logging levels for third-party libraries."""
    logging.getLogger("PyQt6").setLevel(logging.WARNING)
    logging.getLogger("pyremindkit").setLevel(logging.WARNING)


class LoggerMixin:
    """Mixin class to add logging capability to any class."""

    @property
    def logger(self) -> logging.Logger:
        """Logger named after the class module and name."""
        if not hasattr(self, "_logger"):
            self._logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")
        return self._logger


def is_sensitive_data_redaction_enabled() -> bool:
    """Check if sensitive data redaction is enabled."""
    return _logging_config.get("redact_sensitive_data", True)
