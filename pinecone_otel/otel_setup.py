"""Construction and teardown of the tracing pipeline.

Instead of configuring a process-wide provider behind the caller's back,
`configure_opentelemetry` returns a `TracingContext` that owns the provider and
a tracer. Callers hand it to `TracedIndex`, `PineconeInstrumentor` and
`trace_operation`, and call `shutdown()` when they are done with it.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)

from .__version__ import __version__
from .config import OTelConfig
from .exceptions import TelemetryExportError

logger = logging.getLogger(__name__)

TRACER_NAME = "pinecone_otel"


@dataclass
class TracingContext:
    """Handle on a configured tracer provider and the tracer spans are made with."""

    config: OTelConfig
    tracer_provider: TracerProvider
    tracer: trace.Tracer

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self.tracer_provider.force_flush(timeout_millis)

    def shutdown(self):
        """Flush pending spans and release the provider's processors."""
        self.tracer_provider.shutdown()
        logger.debug("Tracer provider for %s shut down", self.config.service_name)


def _otlp_timeout() -> float:
    timeout_str = os.getenv("OTEL_EXPORTER_OTLP_TIMEOUT", "10.0")
    try:
        return float(timeout_str)
    except (ValueError, TypeError):
        logger.warning("Invalid timeout value '%s', using default 10.0", timeout_str)
        return 10.0


def configure_opentelemetry(
    config: OTelConfig,
    span_exporter: Optional[SpanExporter] = None,
    set_global: bool = False,
) -> TracingContext:
    """
    Configures an OpenTelemetry tracer provider for the instrumentation.

    Args:
        config: OTelConfig instance with configuration parameters.
        span_exporter: Exporter to attach through a SimpleSpanProcessor, so spans
            are exported synchronously when they end. Tests pass an
            InMemorySpanExporter here.
        set_global: Also install the provider as the process-wide default.

    Returns:
        TracingContext owning the new provider.

    Raises:
        TelemetryExportError: If the OTLP exporter cannot be created.
    """
    resource = Resource.create({"service.name": config.service_name})
    tracer_provider = TracerProvider(resource=resource)

    if span_exporter is not None:
        tracer_provider.add_span_processor(SimpleSpanProcessor(span_exporter))
        logger.debug("Spans will be exported synchronously to %s", type(span_exporter).__name__)
    elif config.endpoint:
        try:
            otlp_exporter = OTLPSpanExporter(
                endpoint=config.endpoint,
                headers=config.headers,
                timeout=_otlp_timeout(),
            )
        except Exception as e:
            raise TelemetryExportError(f"Could not create OTLP exporter: {e}") from e
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        logger.info("OpenTelemetry tracing configured with OTLP endpoint: %s", config.endpoint)
    else:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("No OTLP endpoint configured, traces will be exported to console.")

    if set_global:
        trace.set_tracer_provider(tracer_provider)

    tracer = tracer_provider.get_tracer(TRACER_NAME, __version__)
    return TracingContext(config=config, tracer_provider=tracer_provider, tracer=tracer)
