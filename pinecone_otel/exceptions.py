"""Custom exceptions for better error handling"""


class InstrumentationError(Exception):
    """Base exception for instrumentation errors"""


class ProviderInstrumentationError(InstrumentationError):
    """Error patching the Pinecone client"""


class TelemetryExportError(InstrumentationError):
    """Error setting up telemetry export"""


class ConfigurationError(InstrumentationError):
    """Error in configuration"""


class PollingTimeoutError(InstrumentationError):
    """A bounded readiness poll ran out of attempts"""

    def __init__(self, description: str, attempts: int):
        super().__init__(f"{description} not satisfied after {attempts} attempts")
        self.description = description
        self.attempts = attempts
