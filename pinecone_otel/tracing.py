"""Public tracing utilities for creating parent spans and trace hierarchy.

Each traced index call is its own span. Wrapping a group of calls in
`trace_operation` makes them children of one parent so a whole retrieval step
shows up as a single trace.

Example:
    from pinecone_otel.tracing import trace_operation

    async def retrieve(tracing, index, embedding):
        with trace_operation(tracing, "retrieve_context", {"app.user": "42"}):
            matches = await index.query(vector=embedding, top_k=5)
            await index.update(id=matches.matches[0].id, set_metadata={"hits": 1})
"""

import logging
from contextlib import contextmanager
from typing import Dict, Optional

from opentelemetry import trace

from .otel_setup import TracingContext

logger = logging.getLogger(__name__)


@contextmanager
def trace_operation(
    tracing: TracingContext,
    name: str,
    attributes: Optional[Dict[str, str]] = None,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
):
    """Context manager that creates a parent span for grouping nested index calls.

    The span is current for the duration of the block, including across
    ``await`` points, so traced calls made inside become its children.

    Args:
        tracing: The tracing context spans are created with.
        name: Name for the parent span (e.g., "rag_pipeline").
        attributes: Optional dict of span attributes to set on the parent span.
        kind: SpanKind for the span (default: INTERNAL).

    Yields:
        The created span object.
    """
    with tracing.tracer.start_as_current_span(
        name, kind=kind, attributes=attributes or {}
    ) as span:
        yield span
