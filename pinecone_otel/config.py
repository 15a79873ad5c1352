"""Configuration management for the Pinecone OpenTelemetry instrumentation library.

This module defines the `OTelConfig` dataclass, which encapsulates the configurable
parameters for the OpenTelemetry setup: service name, exporter endpoint and headers,
whether request/response content is captured on spans, and error handling behavior.
Configuration values are primarily loaded from environment variables, with sensible
defaults provided.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

logger = logging.getLogger(__name__)

VENDOR = "Pinecone"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class OTelConfig:
    """Configuration for OpenTelemetry instrumentation.

    Loads settings from environment variables with sensible defaults.
    """

    service_name: str = field(
        default_factory=lambda: os.getenv("OTEL_SERVICE_NAME", "pinecone-app")
    )
    endpoint: str = field(default_factory=lambda: os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", ""))
    # Query events and vector payloads are only recorded when this is on
    capture_content: bool = field(
        default_factory=lambda: _env_flag("PINECONE_OTEL_CAPTURE_CONTENT", "true")
    )
    fail_on_error: bool = field(
        default_factory=lambda: _env_flag("PINECONE_OTEL_FAIL_ON_ERROR", "false")
    )
    headers: Optional[Dict[str, str]] = None
    vendor: str = VENDOR

    def __post_init__(self):
        """Post-initialization hook to parse headers from environment variable."""
        if self.headers is None:
            headers_str = os.getenv("OTEL_EXPORTER_OTLP_HEADERS", "")
            if headers_str:
                try:
                    self.headers = dict(h.split("=") for h in headers_str.split(","))
                except ValueError:
                    logger.error(
                        "Failed to parse OTEL_EXPORTER_OTLP_HEADERS: '%s'. Expected format 'key1=value1,key2=value2'.",
                        headers_str,
                    )
