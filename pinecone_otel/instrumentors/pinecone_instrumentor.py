"""Automatic instrumentation of the Pinecone client.

`PineconeInstrumentor` patches the ``Pinecone.Index`` and
``Pinecone.IndexAsyncio`` factory methods so that every index handed out by a
client is a `TracedIndex`. The index classes themselves are left alone.
"""

import logging
from typing import Any, List

import wrapt
from opentelemetry.instrumentation.utils import unwrap

from ..exceptions import ProviderInstrumentationError
from ..otel_setup import TracingContext
from .traced_index import TracedIndex

logger = logging.getLogger(__name__)

_MODULE = "pinecone"
_FACTORIES = (
    ("Index", False),
    ("IndexAsyncio", True),
)


def _requested_index_name(args: tuple, kwargs: dict):
    name = args[0] if args else kwargs.get("name")
    return name or None


class PineconeInstrumentor:
    """Instrument Pinecone clients created after `instrument()` is called"""

    def __init__(self, tracing: TracingContext):
        self.tracing = tracing
        self._patched: List[str] = []

    @property
    def is_instrumented(self) -> bool:
        return bool(self._patched)

    def _factory_wrapper(self, is_async: bool):
        def wrapper(wrapped, instance, args, kwargs):  # pylint: disable=W0613
            index = wrapped(*args, **kwargs)
            if isinstance(index, TracedIndex):
                return index
            return TracedIndex(
                index,
                self.tracing,
                index_name=_requested_index_name(args, kwargs),
                is_async=is_async,
            )

        return wrapper

    def instrument(self) -> bool:
        """Patch the Pinecone client factories.

        Returns:
            True if Pinecone is instrumented after the call, False if the
            library is not installed.

        Raises:
            ProviderInstrumentationError: If patching fails and the config
                asks for errors to be raised.
        """
        if self.is_instrumented:
            logger.debug("Pinecone already instrumented")
            return True

        try:
            import pinecone  # pylint: disable=C0415
        except ImportError:
            logger.info("Pinecone not installed, skipping instrumentation")
            return False

        try:
            client_class = pinecone.Pinecone
            for factory, is_async in _FACTORIES:
                if not hasattr(client_class, factory):
                    logger.debug("Pinecone client has no %s factory", factory)
                    continue
                wrapt.wrap_function_wrapper(
                    _MODULE, f"Pinecone.{factory}", self._factory_wrapper(is_async)
                )
                self._patched.append(factory)
        except Exception as e:
            logger.error("Failed to instrument Pinecone: %s", e, exc_info=True)
            self.uninstrument()
            if self.tracing.config.fail_on_error:
                raise ProviderInstrumentationError(f"Failed to instrument Pinecone: {e}") from e
            return False

        logger.info("Pinecone instrumentation enabled (%s)", ", ".join(self._patched))
        return True

    def uninstrument(self):
        """Restore the original Pinecone client factories."""
        if not self._patched:
            return

        import pinecone  # pylint: disable=C0415

        for factory in self._patched:
            unwrap(pinecone.Pinecone, factory)
        self._patched = []
        logger.info("Pinecone instrumentation disabled")

    def wrap(self, index: Any, index_name: str = None) -> TracedIndex:
        """Trace an index that was created without going through a patched client."""
        return TracedIndex(index, self.tracing, index_name=index_name)
