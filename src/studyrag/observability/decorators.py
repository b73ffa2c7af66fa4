"""
Tracing decorators for instrumenting pipeline stages.
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any

from opentelemetry.trace import Status, StatusCode

from .tracer import get_tracer, is_tracing_enabled


def trace_span(
    name: str | None = None,
    attributes: dict[str, Any] | None = None,
    record_exception: bool = True,
):
    """
    Decorator to trace a function execution as an OpenTelemetry span.

    Works on both plain and ``async def`` functions. When tracing is not
    initialised the wrapped function is called directly.

    Example:
        @trace_span("retrieval.assemble", attributes={"component": "retrieval"})
        async def assemble(...):
            ...
    """
    def decorator(func: Callable) -> Callable:
        span_name = name or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not is_tracing_enabled():
                return func(*args, **kwargs)

            with get_tracer().start_as_current_span(span_name) as span:
                _apply_attributes(span, attributes)
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if record_exception:
                        _record_error(span, e)
                    raise

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            if not is_tracing_enabled():
                return await func(*args, **kwargs)

            with get_tracer().start_as_current_span(span_name) as span:
                _apply_attributes(span, attributes)
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if record_exception:
                        _record_error(span, e)
                    raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return wrapper

    return decorator


def _apply_attributes(span, attributes: dict[str, Any] | None) -> None:
    for key, value in (attributes or {}).items():
        span.set_attribute(key, value)


def _record_error(span, error: Exception) -> None:
    span.record_exception(error)
    span.set_status(Status(StatusCode.ERROR, str(error)))
