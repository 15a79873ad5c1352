"""Tracing adapters around Pinecone index objects.

`TracedIndex` wraps an existing ``pinecone.Index`` (or ``IndexAsyncio``) by
composition: it is a ``wrapt.ObjectProxy``, so ``isinstance`` checks and every
attribute that is not a traced operation go straight to the wrapped index.
Traced operations are routed through an `IndexOperationWrapper`, which emits
one span per call and returns the client's result untouched.

Example:
    from pinecone import Pinecone
    from pinecone_otel import OTelConfig, configure_opentelemetry
    from pinecone_otel.instrumentors import TracedIndex

    tracing = configure_opentelemetry(OTelConfig())
    index = TracedIndex(Pinecone(api_key="...").Index("docs"), tracing, index_name="docs")
    index.namespace("ns1").query(vector=[0.1] * 8, top_k=3)
"""

import inspect
import logging
from typing import Any, Dict, Iterable, List, Optional

import wrapt

from ..otel_setup import TracingContext
from ..semconv import Operations
from .attributes import index_host, index_name_from_host
from .base import build_wrappers

logger = logging.getLogger(__name__)


def _looks_async(index: Any) -> bool:
    return inspect.iscoroutinefunction(getattr(index, Operations.QUERY, None))


class TracedIndex(wrapt.ObjectProxy):
    """Pinecone index proxy that traces its data-plane operations."""

    def __init__(
        self,
        index: Any,
        tracing: TracingContext,
        index_name: Optional[str] = None,
        is_async: Optional[bool] = None,
    ):
        super().__init__(index)
        host = index_host(index)
        self._self_tracing = tracing
        self._self_index_host = host
        self._self_index_name = index_name or index_name_from_host(host)
        self._self_is_async = _looks_async(index) if is_async is None else is_async
        self._self_wrappers = build_wrappers(tracing)

    @property
    def index_name(self) -> Optional[str]:
        return self._self_index_name

    @property
    def index_host(self) -> Optional[str]:
        return self._self_index_host

    @property
    def tracing(self) -> TracingContext:
        return self._self_tracing

    def _invoke(self, operation: str, args: tuple, kwargs: Dict[str, Any]):
        wrapper = self._self_wrappers[operation]
        method = getattr(self.__wrapped__, operation)
        if self._self_is_async:
            return wrapper.traced_async(method, self, args, kwargs)
        return wrapper(method, self, args, kwargs)

    def upsert(self, *args, **kwargs):
        return self._invoke(Operations.UPSERT, args, kwargs)

    def query(self, *args, **kwargs):
        return self._invoke(Operations.QUERY, args, kwargs)

    def delete(self, *args, **kwargs):
        return self._invoke(Operations.DELETE, args, kwargs)

    def fetch(self, *args, **kwargs):
        return self._invoke(Operations.FETCH, args, kwargs)

    def update(self, *args, **kwargs):
        return self._invoke(Operations.UPDATE, args, kwargs)

    def describe_index_stats(self, *args, **kwargs):
        return self._invoke(Operations.DESCRIBE_INDEX_STATS, args, kwargs)

    def namespace(self, name: str) -> "NamespacedIndex":
        """View of this index bound to one namespace."""
        return NamespacedIndex(self, name)

    # Context managers must hand back the proxy, not the raw index
    def __enter__(self):
        self.__wrapped__.__enter__()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return self.__wrapped__.__exit__(exc_type, exc_value, traceback)

    async def __aenter__(self):
        await self.__wrapped__.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        return await self.__wrapped__.__aexit__(exc_type, exc_value, traceback)

    def __repr__(self):
        return f"<TracedIndex {self._self_index_name!r} wrapping {self.__wrapped__!r}>"


class NamespacedIndex:
    """Operations on a single namespace of a `TracedIndex`.

    Each method issues exactly one call on the underlying index, so each
    produces exactly one span.
    """

    def __init__(self, index: TracedIndex, name: str):
        self.index = index
        self.name = name

    def upsert(self, vectors: List[Any], **kwargs):
        return self.index.upsert(vectors=vectors, namespace=self.name, **kwargs)

    def query(self, **kwargs):
        return self.index.query(namespace=self.name, **kwargs)

    def fetch(self, ids: List[str], **kwargs):
        return self.index.fetch(ids=ids, namespace=self.name, **kwargs)

    def update(self, id: str, **kwargs):  # pylint: disable=W0622
        return self.index.update(id=id, namespace=self.name, **kwargs)

    def delete_one(self, id: str):  # pylint: disable=W0622
        return self.index.delete(ids=[id], namespace=self.name)

    def delete_many(self, ids: Iterable[str] = None, filter: Optional[Dict] = None):  # pylint: disable=W0622
        if filter is not None:
            return self.index.delete(filter=filter, namespace=self.name)
        if ids is None:
            raise ValueError("delete_many needs ids or a metadata filter")
        return self.index.delete(ids=list(ids), namespace=self.name)

    def delete_all(self):
        return self.index.delete(delete_all=True, namespace=self.name)

    def __repr__(self):
        return f"<NamespacedIndex {self.name!r} of {self.index.index_name!r}>"
