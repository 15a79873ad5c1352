"""Tracing of Pinecone index operations.

`TracedIndex` wraps a single index by composition; `PineconeInstrumentor`
patches the client's index factories so every new index comes back traced.
"""

from .base import IndexOperationWrapper
from .pinecone_instrumentor import PineconeInstrumentor
from .traced_index import NamespacedIndex, TracedIndex

__all__ = [
    "IndexOperationWrapper",
    "NamespacedIndex",
    "PineconeInstrumentor",
    "TracedIndex",
]
