"""Span lifecycle for a single traced Pinecone index operation.

`IndexOperationWrapper` follows the wrapt wrapper signature
``(wrapped, instance, args, kwargs)``. ``instance`` is the `TracedIndex` the
call came through, which knows the index name and host. One span is opened per
call, request attributes are attached before delegating, response attributes
and query events after, and the span is always ended, with ERROR status when
the client raised.
"""

import inspect
import logging
from typing import Any, Callable, Dict, Optional

from opentelemetry import context as context_api
from opentelemetry.instrumentation.utils import _SUPPRESS_INSTRUMENTATION_KEY
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from ..otel_setup import TracingContext
from ..semconv import Operations, SpanAttributes
from . import attributes as attrs

logger = logging.getLogger(__name__)


class IndexOperationWrapper:
    """Traces calls to one index operation (``query``, ``upsert``, ...)."""

    def __init__(self, tracing: TracingContext, operation: str):
        self.tracing = tracing
        self.operation = operation
        self.span_name = Operations.span_name(operation)

    def __call__(self, wrapped: Callable[..., Any], instance: Any, args: tuple, kwargs: dict):
        if context_api.get_value(_SUPPRESS_INSTRUMENTATION_KEY):
            return wrapped(*args, **kwargs)

        if inspect.iscoroutinefunction(wrapped):
            return self.traced_async(wrapped, instance, args, kwargs)

        return self.traced_sync(wrapped, instance, args, kwargs)

    def _start_attributes(self, instance: Any, args: tuple, kwargs: dict) -> Dict[str, Any]:
        config = self.tracing.config
        span_attributes = attrs.common_attributes(
            config.vendor,
            self.operation,
            getattr(instance, "index_name", None),
            getattr(instance, "index_host", None),
            None,
        )
        try:
            namespace = attrs.namespace_of(self.operation, args, kwargs)
            if namespace:
                span_attributes[SpanAttributes.VECTOR_DB_NAMESPACE] = namespace
            span_attributes.update(attrs.request_attributes(self.operation, args, kwargs))
        except Exception as e:
            logger.warning("Failed to extract request attributes for '%s': %s", self.span_name, e)
        return span_attributes

    def _on_success(self, span: Span, kwargs: dict, response: Any):
        try:
            span.set_attributes(attrs.response_attributes(self.operation, response))
            if self.operation == Operations.QUERY and self.tracing.config.capture_content:
                for name, event_attributes in attrs.query_events(kwargs, response):
                    span.add_event(name, event_attributes)
        except Exception as e:
            logger.warning("Failed to record response for '%s': %s", self.span_name, e)
        span.set_status(Status(StatusCode.OK))

    @staticmethod
    def _on_error(span: Span, error: BaseException):
        span.set_attribute(SpanAttributes.ERROR_TYPE, type(error).__qualname__)
        span.set_status(Status(StatusCode.ERROR, str(error)))
        span.record_exception(error)

    def traced_sync(self, wrapped: Callable[..., Any], instance: Any, args: tuple, kwargs: dict):
        with self.tracing.tracer.start_as_current_span(
            self.span_name,
            kind=SpanKind.CLIENT,
            attributes=self._start_attributes(instance, args, kwargs),
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                response = wrapped(*args, **kwargs)
            except BaseException as e:  # includes CancelledError
                self._on_error(span, e)
                raise

            self._on_success(span, kwargs, response)
            return response

    async def traced_async(
        self, wrapped: Callable[..., Any], instance: Any, args: tuple, kwargs: dict
    ):
        if context_api.get_value(_SUPPRESS_INSTRUMENTATION_KEY):
            return await wrapped(*args, **kwargs)

        with self.tracing.tracer.start_as_current_span(
            self.span_name,
            kind=SpanKind.CLIENT,
            attributes=self._start_attributes(instance, args, kwargs),
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                response = await wrapped(*args, **kwargs)
            except BaseException as e:  # includes CancelledError
                self._on_error(span, e)
                raise

            self._on_success(span, kwargs, response)
            return response


def build_wrappers(
    tracing: TracingContext, operations: Optional[tuple] = None
) -> Dict[str, IndexOperationWrapper]:
    """One wrapper per traced operation, keyed by method name."""
    return {
        operation: IndexOperationWrapper(tracing, operation)
        for operation in (operations or Operations.ALL)
    }
