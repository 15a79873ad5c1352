import os
import logging
from typing import Optional

from .__version__ import __version__
from .config import OTelConfig
from .exceptions import InstrumentationError
from .instrumentors import NamespacedIndex, PineconeInstrumentor, TracedIndex
from .logging_config import setup_logging
from .otel_setup import TracingContext, configure_opentelemetry
from .tracing import trace_operation

# Setup logging
logger = setup_logging(
    level=os.getenv("PINECONE_OTEL_LOG_LEVEL", "INFO"),
    log_file=os.getenv("PINECONE_OTEL_LOG_FILE"),
)


def instrument(
    service_name: Optional[str] = None,
    endpoint: Optional[str] = None,
    capture_content: Optional[bool] = None,
    fail_on_error: bool = False,
) -> Optional[TracingContext]:
    """
    Single function to trace every Pinecone index your application creates.

    Args:
        service_name: Service name for telemetry
        endpoint: OTLP endpoint URL
        capture_content: Record query events and vector payloads on spans
        fail_on_error: If True, raise exceptions on instrumentation errors.
                      If False, log errors and continue (production default)

    Returns:
        The global TracingContext, or None if setup failed and fail_on_error is False

    Raises:
        InstrumentationError: If fail_on_error=True and setup fails
    """
    try:
        overrides = {
            "service_name": service_name,
            "endpoint": endpoint,
            "capture_content": capture_content,
        }
        config = OTelConfig(
            fail_on_error=fail_on_error,
            **{key: value for key, value in overrides.items() if value is not None},
        )

        logger.info("Initializing Pinecone instrumentation for service: %s", config.service_name)
        logger.debug(
            "Configuration: endpoint=%s, capture_content=%s",
            config.endpoint,
            config.capture_content,
        )

        tracing = configure_opentelemetry(config, set_global=True)
        PineconeInstrumentor(tracing).instrument()

        logger.info("Pinecone instrumentation initialized successfully for %s", config.service_name)
        return tracing

    except InstrumentationError as e:
        logger.error("A known instrumentation error occurred: %s", e, exc_info=True)
        if fail_on_error:
            raise
        logger.warning("Continuing without instrumentation due to a known error.")
        return None
    except Exception as e:
        logger.error("An unexpected error occurred during instrumentation: %s", e, exc_info=True)
        if fail_on_error:
            raise InstrumentationError(
                f"Instrumentation setup failed due to an unexpected error: {e}"
            ) from e
        logger.warning("Continuing without instrumentation due to an unexpected error.")
        return None


__all__ = [
    "__version__",
    "instrument",
    "configure_opentelemetry",
    "trace_operation",
    "NamespacedIndex",
    "OTelConfig",
    "PineconeInstrumentor",
    "TracedIndex",
    "TracingContext",
]
