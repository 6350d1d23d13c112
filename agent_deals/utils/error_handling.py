"""
Error handling utilities for the AgentDeals catalog.

This module provides the exception types raised inside the system, error
tracking for monitoring, and a decorator for graceful degradation of
component calls.
"""

import functools
import threading
import traceback
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .logging import get_logger


class AgentDealsError(Exception):
    """Base class for errors raised inside the system."""


class CatalogLoadError(AgentDealsError):
    """A backing data document is missing, unreadable or malformed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class PageFetchError(AgentDealsError):
    """A vendor pricing page could not be fetched."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""

    NETWORK = "network"
    CONFIGURATION = "configuration"
    DATA_LOAD = "data_load"
    DATA_VALIDATION = "data_validation"
    TOOL_CALL = "tool_call"
    SYSTEM = "system"


@dataclass
class ErrorInfo:
    """Information about an error occurrence."""

    timestamp: datetime
    component: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    exception_type: str
    traceback: str
    context: Dict[str, Any]


class ErrorTracker:
    """
    Tracks errors and provides statistics for monitoring.
    """

    def __init__(self, max_errors: int = 1000):
        """
        Initialize error tracker.

        Args:
            max_errors: Maximum number of errors to keep in memory
        """
        self.max_errors = max_errors
        self.errors: List[ErrorInfo] = []
        self.error_counts: Dict[str, int] = {}
        self.component_errors: Dict[str, List[ErrorInfo]] = {}
        self.logger = get_logger("error_tracker")
        self._lock = threading.Lock()

    def record_error(
        self,
        component: str,
        category: ErrorCategory,
        severity: ErrorSeverity,
        message: str,
        exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorInfo:
        """
        Record an error occurrence.

        Args:
            component: Component where error occurred
            category: Error category
            severity: Error severity
            message: Error message
            exception: Exception object if available
            context: Additional context information

        Returns:
            ErrorInfo object
        """
        error_info = ErrorInfo(
            timestamp=datetime.now(),
            component=component,
            category=category,
            severity=severity,
            message=message,
            exception_type=type(exception).__name__ if exception else "Unknown",
            traceback=(
                "".join(
                    traceback.format_exception(
                        type(exception), exception, exception.__traceback__
                    )
                )
                if exception
                else ""
            ),
            context=context or {},
        )

        error_key = f"{component}:{category.value}"
        with self._lock:
            self.errors.append(error_info)
            if len(self.errors) > self.max_errors:
                self.errors.pop(0)

            self.error_counts[error_key] = self.error_counts.get(error_key, 0) + 1

            self.component_errors.setdefault(component, []).append(error_info)
            if len(self.component_errors[component]) > 100:
                self.component_errors[component].pop(0)

        self.logger.warning(
            f"Error recorded: {message}",
            extra={
                "component": component,
                "category": category.value,
                "severity": severity.value,
                "exception_type": error_info.exception_type,
                "context": context,
            },
        )

        return error_info

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        last_day = datetime.now() - timedelta(days=1)
        with self._lock:
            errors = list(self.errors)
            error_counts = self.error_counts.copy()

        return {
            "total_errors": len(errors),
            "errors_last_day": len([e for e in errors if e.timestamp >= last_day]),
            "error_counts": error_counts,
            "category_breakdown": {
                category.value: len([e for e in errors if e.category == category])
                for category in ErrorCategory
            },
        }

    def get_component_errors(self, component: str, limit: int = 10) -> List[ErrorInfo]:
        """Get recent errors for a specific component."""
        with self._lock:
            return self.component_errors.get(component, [])[-limit:]

    def clear(self):
        """Forget every recorded error."""
        with self._lock:
            self.errors.clear()
            self.error_counts.clear()
            self.component_errors.clear()


# Global error tracker instance
_error_tracker: Optional[ErrorTracker] = None
_error_tracker_lock = threading.Lock()


def get_error_tracker() -> ErrorTracker:
    """Get global error tracker instance."""
    global _error_tracker
    with _error_tracker_lock:
        if _error_tracker is None:
            _error_tracker = ErrorTracker()
        return _error_tracker


def with_error_handling(
    component: str,
    category: ErrorCategory,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    fallback_value: Any = None,
    suppress_exceptions: bool = False,
    passthrough: Tuple[Type[Exception], ...] = (),
):
    """
    Decorator that records exceptions with the error tracker.

    Args:
        component: Component name
        category: Error category
        severity: Error severity
        fallback_value: Value to return on failure when suppressing
        suppress_exceptions: Whether to suppress exceptions
        passthrough: Exception types re-raised without being recorded
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except passthrough:
                raise
            except Exception as e:
                get_error_tracker().record_error(
                    component=component,
                    category=category,
                    severity=severity,
                    message=f"Error in {func.__name__}: {str(e)}",
                    exception=e,
                    context={"function": func.__name__},
                )

                if suppress_exceptions:
                    return fallback_value
                raise

        return wrapper

    return decorator
