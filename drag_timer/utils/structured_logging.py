"""Structured logging utilities for Drag Timer.

This module provides structured logging with contextual information,
data redaction, and operation timing.
"""

import functools
import logging
import time
from contextlib import contextmanager
from typing import Any

from .logging_config import LoggerMixin, is_sensitive_data_redaction_enabled

SENSITIVE_KEYS = frozenset({"password", "token", "secret", "credential", "auth"})


class StructuredLogger(LoggerMixin):
    """Logger that appends ``key=value`` context to every message."""

    def __init__(self, context: dict[str, Any] | None = None):
        """Initialize structured logger with optional context.

        Args:
            context: Default context to include in all log messages
        """
        self._context = context or {}
        self._performance_metrics = {}

    def _format_message(self, message: str, **kwargs) -> str:
        full_context = {**self._context, **kwargs}
        redacted_context = self._redact_sensitive_data(full_context)

        if redacted_context:
            context_str = " | ".join([f"{k}={v}" for k, v in redacted_context.items()])
            return f"{message} | {context_str}"
        return message

    def _redact_sensitive_data(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask secrets and truncate long strings.

        Args:
            data: Dictionary containing log data

        Returns:
            Dictionary with sensitive data redacted
        """
        if not is_sensitive_data_redaction_enabled():
            return data

        redacted = {}
        for key, value in data.items():
            key_lower = key.lower()

            if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
                redacted[key] = "[REDACTED]"
            elif isinstance(value, str) and len(value) > 100:
                redacted[key] = f"{value[:50]}...{value[-20:]} (len={len(value)})"
            else:
                redacted[key] = value

        return redacted

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs) -> None:
        self.logger.error(self._format_message(message, **kwargs))

    def exception(self, message: str, **kwargs) -> None:
        self.logger.exception(self._format_message(message, **kwargs))

    def update_context(self, **kwargs) -> None:
        """Update the default context for this logger."""
        self._context.update(kwargs)

    @contextmanager
    def context(self, **kwargs):
        """Temporary context manager for logging with additional context.

        Args:
            **kwargs: Temporary context data
        """
        original_context = self._context.copy()
        self._context.update(kwargs)
        try:
            yield self
        finally:
            self._context = original_context

    def log_performance(self, operation: str, duration: float, **kwargs) -> None:
        """Record one timing sample and log the running average.

        Args:
            operation: Name of the operation
            duration: Duration in seconds
            **kwargs: Additional performance context
        """
        if operation not in self._performance_metrics:
            self._performance_metrics[operation] = {
                "count": 0,
                "total_duration": 0.0,
                "min_duration": float("inf"),
                "max_duration": 0.0,
            }

        metrics = self._performance_metrics[operation]
        metrics["count"] += 1
        metrics["total_duration"] += duration
        metrics["min_duration"] = min(metrics["min_duration"], duration)
        metrics["max_duration"] = max(metrics["max_duration"], duration)

        avg_duration = metrics["total_duration"] / metrics["count"]

        self.debug(
            f"Performance: {operation}",
            duration_s=f"{duration:.3f}",
            avg_duration_s=f"{avg_duration:.3f}",
            count=metrics["count"],
            **kwargs,
        )

    def get_performance_stats(self) -> dict[str, dict[str, int | float]]:
        """Get performance statistics keyed by operation."""
        stats = {}
        for operation, metrics in self._performance_metrics.items():
            stats[operation] = {
                "count": metrics["count"],
                "total_duration": metrics["total_duration"],
                "avg_duration": metrics["total_duration"] / metrics["count"],
                "min_duration": metrics["min_duration"],
                "max_duration": metrics["max_duration"],
            }
        return stats


def timed_operation(operation_name: str, logger: StructuredLogger | None = None):
    """Decorator to automatically log operation timing.

    Args:
        operation_name: Name of the operation for logging
        logger: Optional logger instance. If None, the decorated method's
            ``structured_logger`` is used, or a fresh one is created.

    Returns:
        Decorated function
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            actual_logger = logger
            if actual_logger is None and args and hasattr(args[0], "structured_logger"):
                actual_logger = args[0].structured_logger
            elif actual_logger is None:
                actual_logger = StructuredLogger()

            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                duration = time.time() - start_time
                actual_logger.log_performance(operation_name, duration, function=func.__name__, success=True)
                return result
            except Exception as e:
                duration = time.time() - start_time
                actual_logger.log_performance(
                    operation_name, duration, function=func.__name__, success=False, error=str(e)
                )
                raise

        return wrapper

    return decorator


class EnhancedLoggerMixin(LoggerMixin):
    """Logger mixin that also provides a class-scoped StructuredLogger."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._structured_logger = None

    @property
    def structured_logger(self) -> StructuredLogger:
        """StructuredLogger carrying this class's name as context."""
        if self._structured_logger is None:
            context = {"class": self.__class__.__name__}
            self._structured_logger = create_contextual_logger(self.__class__.__module__, context)
        return self._structured_logger

    def log_error_with_context(self, error: Exception, operation: str, **kwargs) -> None:
        """Log error with contextual information.

        Args:
            error: Exception that occurred
            operation: Operation that failed
            **kwargs: Additional context
        """
        self.structured_logger.error(
            f"Operation failed: {operation}",
            operation=operation,
            error_type=type(error).__name__,
            error_message=str(error),
            **kwargs,
        )


def create_contextual_logger(name: str, context: dict[str, Any] | None = None) -> StructuredLogger:
    """Create a StructuredLogger bound to the named stdlib logger."""
    logger = StructuredLogger(context)
    logger._logger = logging.getLogger(name)
    return logger


def get_structured_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        StructuredLogger instance
    """
    return create_contextual_logger(name)
