"""Tracing helpers: a span decorator and a span context manager."""

import asyncio
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Only these kwargs are copied onto spans; anything else (message bodies,
# phone numbers, passwords) stays out of trace exports.
_SAFE_SPAN_ATTR_KEYS = frozenset({
    "user_id", "campaign_id", "group_id", "role_id", "permission_name",
    "permission_names", "status", "target_type", "limit", "page",
})


def _record_kwargs(span: trace.Span, kwargs: dict[str, Any]) -> None:
    for key, value in kwargs.items():
        if key in _SAFE_SPAN_ATTR_KEYS:
            span.set_attribute(f"arg.{key}", str(value))


def _finish(span: trace.Span, exc: BaseException | None) -> None:
    if exc is None:
        span.set_status(Status(StatusCode.OK))
    else:
        span.set_status(Status(StatusCode.ERROR, str(exc)))
        span.record_exception(exc)


def traced(operation_name: str | None = None) -> Callable:
    """Decorator: run the function (sync or async) inside a span.

    Span name defaults to module.function. Allowlisted keyword arguments
    are recorded as span attributes.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(func.__module__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                _record_kwargs(span, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _finish(span, e)
                    raise
                _finish(span, None)
                return result

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                _record_kwargs(span, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _finish(span, e)
                    raise
                _finish(span, None)
                return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span (no-op when nothing is recording)."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)


class TracedOperation:
    """Async context manager that opens a span for a block of work.

    Used for work that outlives a single call, e.g. a background campaign
    dispatch loop.
    """

    def __init__(self, operation_name: str, attributes: dict | None = None) -> None:
        self.operation_name = operation_name
        self.attributes = attributes or {}
        self._tracer = trace.get_tracer(__name__)
        self._cm: Any = None
        self.span: trace.Span | None = None

    async def __aenter__(self) -> "TracedOperation":
        self._cm = self._tracer.start_as_current_span(
            self.operation_name,
            attributes=self.attributes,
            record_exception=False,
            set_status_on_exception=False,
        )
        self.span = self._cm.__enter__()
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        if self.span is not None:
            _finish(self.span, exc_val)
        self._cm.__exit__(exc_type, exc_val, exc_tb)
