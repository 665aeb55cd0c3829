"""Observability utilities: structured log context, timing and metrics."""

import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Callable
from dataclasses import dataclass, field, replace
from functools import wraps


def new_correlation_id(prefix: str = "req") -> str:
    """Short random id used to tie together the log lines of one request."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class LogContext:
    """Context information for structured logging."""

    correlation_id: str = field(default_factory=new_correlation_id)
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        """Create new context with operation set."""
        return replace(self, operation=operation, metadata=self.metadata.copy())

    def with_metadata(self, **kwargs) -> "LogContext":
        """Create new context with additional metadata."""
        return replace(self, metadata={**self.metadata, **kwargs})

    def render(self, message: str, **extra: Any) -> str:
        """Format a message with the context prefix and metadata suffix."""
        formatted = f"[{self.correlation_id}] {message}"
        if self.operation:
            formatted = f"[{self.operation}] {formatted}"
        fields = {**self.metadata, **extra}
        if fields:
            formatted += " (" + ", ".join(f"{k}={v}" for k, v in fields.items()) + ")"
        return formatted


class StructuredLogger:
    """Logger accepting an optional LogContext on every call."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[LogContext] = None,
        **kwargs,
    ):
        text = context.render(message, **kwargs) if context else message
        self._logger.log(level, text)

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log debug message."""
        self._log(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log info message."""
        self._log(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log warning message."""
        self._log(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log error message."""
        self._log(logging.ERROR, message, context, **kwargs)


@dataclass
class PerformanceMetrics:
    """Timing record for one operation."""

    operation: str
    start_time: float
    end_time: float
    success: bool
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        """Operation duration in seconds."""
        return self.end_time - self.start_time


class MetricsCollector:
    """Collector for performance metrics of a single request."""

    def __init__(self):
        self._metrics: List[PerformanceMetrics] = []

    def record_metric(self, metric: PerformanceMetrics):
        self._metrics.append(metric)

    def get_metrics(self, operation: Optional[str] = None) -> List[PerformanceMetrics]:
        """Get recorded metrics, optionally filtered by operation."""
        if operation:
            return [m for m in self._metrics if m.operation == operation]
        return self._metrics.copy()

    def get_summary(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """Get summary statistics for metrics."""
        metrics = self.get_metrics(operation)

        if not metrics:
            return {}

        durations = [m.duration for m in metrics]
        successful = [m for m in metrics if m.success]

        return {
            "total_operations": len(metrics),
            "successful_operations": len(successful),
            "failed_operations": len(metrics) - len(successful),
            "success_rate": len(successful) / len(metrics),
            "avg_duration": sum(durations) / len(durations),
            "max_duration": max(durations),
            "total_duration": sum(durations),
            "total_output_bytes": sum(
                m.metadata.get("output_bytes", 0) for m in metrics
            ),
        }


def timed_operation(
    operation_name: str,
    metrics_collector: Optional[MetricsCollector] = None,
):
    """Decorator recording the duration and outcome of each call."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            success = False
            error_message = None

            try:
                result = func(*args, **kwargs)
                success = True
                return result
            except Exception as e:
                error_message = str(e)
                raise
            finally:
                if metrics_collector is not None:
                    metrics_collector.record_metric(
                        PerformanceMetrics(
                            operation=operation_name,
                            start_time=start_time,
                            end_time=time.time(),
                            success=success,
                            error_message=error_message,
                        )
                    )

        return wrapper

    return decorator
