"""
Structured logging helpers on top of loguru.

Features:
- Dot-notation events with a data payload
- Correlation ID tracking through contextvars
- Async function tracing with durations
"""
import json
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from contextvars import ContextVar
from functools import wraps

from loguru import logger as loguru_logger

# Context variables for correlation tracking
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
operation_var: ContextVar[Optional[str]] = ContextVar('operation', default=None)
block_id_var: ContextVar[Optional[str]] = ContextVar('block_id', default=None)


class StructuredLogger:
    """
    Structured logger with correlation tracking.

    Every record carries:
    - The event name (``<domain>.<action>.<result>``)
    - Correlation ID, operation and block ID when set
    - An optional ``extra`` data payload rendered as JSON
    """

    def __init__(self, name: str):
        self.name = name

    def _correlation(self) -> Dict[str, Any]:
        return {
            "correlation_id": correlation_id_var.get(),
            "operation": operation_var.get(),
            "block_id": block_id_var.get(),
        }

    def _emit(
        self,
        level: str,
        event: str,
        message: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        text = event if not message or message == event else f"{event} - {message}"
        if extra:
            text = f"{text} {json.dumps(extra, default=str, ensure_ascii=False)}"

        bound = loguru_logger.bind(
            logger_name=self.name,
            event=event,
            data=extra or {},
            **self._correlation()
        )
        if exc_info is not None:
            bound = bound.opt(exception=exc_info)
        bound.log(level, text)

    def debug(self, event: str, message: str = None, extra: Dict = None, **kwargs):
        """Log debug message"""
        self._emit("DEBUG", event, message, extra)

    def info(self, event: str, message: str = None, extra: Dict = None, **kwargs):
        """Log info message"""
        self._emit("INFO", event, message, extra)

    def warning(
        self,
        event: str,
        message: str = None,
        extra: Dict = None,
        exc_info: BaseException = None,
        **kwargs
    ):
        """Log warning message"""
        self._emit("WARNING", event, message, extra, exc_info)

    def error(
        self,
        event: str,
        message: str = None,
        extra: Dict = None,
        exc_info: BaseException = None,
        **kwargs
    ):
        """Log error message"""
        self._emit("ERROR", event, message, extra, exc_info)

    def performance(
        self,
        event: str,
        duration_ms: float,
        extra: Dict = None
    ):
        """Log performance metric"""
        perf_data = {"duration_ms": round(duration_ms, 2)}
        if extra:
            perf_data.update(extra)
        self._emit("INFO", event, None, perf_data)


def get_logger(name: str) -> StructuredLogger:
    """
    Get structured logger for module.

    Usage:
        logger = get_logger(__name__)
        logger.info("design.block.started", extra={"block_id": "header"})
    """
    return StructuredLogger(name)


class log_context:
    """
    Context manager for correlation tracking.

    Usage:
        with log_context(correlation_id="abc", operation="design_block"):
            logger.info("design.block.started")
    """

    def __init__(
        self,
        correlation_id: str = None,
        operation: str = None,
        block_id: str = None,
        **kwargs
    ):
        self.correlation_id = correlation_id
        self.operation = operation
        self.block_id = block_id
        self.extra_context = kwargs
        self._tokens = []

    def __enter__(self):
        """Set context variables"""
        if self.correlation_id:
            self._tokens.append((correlation_id_var, correlation_id_var.set(self.correlation_id)))
        if self.operation:
            self._tokens.append((operation_var, operation_var.set(self.operation)))
        if self.block_id:
            self._tokens.append((block_id_var, block_id_var.set(self.block_id)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Restore previous context"""
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []


def trace_async(event_prefix: str):
    """
    Decorator for tracing async functions.

    Usage:
        @trace_async("design.block")
        async def design_block(...):
            ...
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)

            start_time = datetime.now(timezone.utc)

            logger.debug(
                f"{event_prefix}.started",
                extra={"function": func.__name__}
            )

            try:
                result = await func(*args, **kwargs)

                duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000

                logger.performance(
                    f"{event_prefix}.completed",
                    duration_ms=duration_ms,
                    extra={"function": func.__name__, "success": True}
                )

                return result

            except Exception as e:
                duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000

                logger.error(
                    f"{event_prefix}.failed",
                    extra={
                        "function": func.__name__,
                        "duration_ms": duration_ms,
                        "error_type": type(e).__name__
                    },
                    exc_info=e
                )
                raise

        return wrapper
    return decorator


"""
LOG EVENT NAMING CONVENTIONS:

Use dot notation: <domain>.<action>.<result>

Examples:
- complexity.ai.attempt_failed
- complexity.fallback.rules
- strategy.smart.fallback
- design.block.completed
- catalog.load.not_found
- tools.call.rejected
"""
