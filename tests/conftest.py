"""Shared fixtures: an in-memory exporter and an explicit tracing context per test."""

from types import SimpleNamespace

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from pinecone_otel.config import OTelConfig
from pinecone_otel.otel_setup import configure_opentelemetry

FAKE_HOST = "docs-abc1234.svc.aped-4627-b74a.pinecone.io"


@pytest.fixture
def span_exporter():
    """In-memory exporter, emptied before and after each test."""
    exporter = InMemorySpanExporter()
    exporter.clear()
    yield exporter
    exporter.clear()


@pytest.fixture
def config():
    return OTelConfig(service_name="test-pinecone", capture_content=True, fail_on_error=False)


@pytest.fixture
def tracing(config, span_exporter):
    """Tracing context exporting synchronously to `span_exporter`."""
    context = configure_opentelemetry(config, span_exporter=span_exporter)
    yield context
    context.shutdown()


class FakeIndex:
    """Stands in for ``pinecone.Index``; records calls and returns canned responses."""

    def __init__(self, host=FAKE_HOST):
        self._config = SimpleNamespace(host=host)
        self.calls = []
        self.error = None
        self.query_response = {
            "namespace": "ns1",
            "usage": {"read_units": 6},
            "matches": [
                {"id": "vec2", "score": 1.0, "values": [0.2] * 8},
                {"id": "vec3", "score": 1.0, "values": [0.3] * 8, "metadata": {"test_meta": 42}},
                {"id": "vec4", "score": 0.99, "values": [0.4] * 8},
            ],
        }

    def _record(self, operation, args, kwargs, response):
        self.calls.append((operation, args, kwargs))
        if self.error is not None:
            raise self.error
        return response

    def upsert(self, *args, **kwargs):
        vectors = args[0] if args else kwargs["vectors"]
        return self._record("upsert", args, kwargs, {"upserted_count": len(vectors)})

    def query(self, *args, **kwargs):
        return self._record("query", args, kwargs, self.query_response)

    def delete(self, *args, **kwargs):
        return self._record("delete", args, kwargs, {})

    def fetch(self, *args, **kwargs):
        return self._record("fetch", args, kwargs, {"vectors": {"vec1": {"id": "vec1"}}})

    def update(self, *args, **kwargs):
        return self._record("update", args, kwargs, {})

    def describe_index_stats(self, *args, **kwargs):
        return self._record(
            "describe_index_stats",
            args,
            kwargs,
            {"total_vector_count": 4, "dimension": 8, "namespaces": {"ns1": {}}},
        )

    def list_paginated(self, **kwargs):
        return {"vectors": [{"id": "vec1"}], "kwargs": kwargs}


class FakeAsyncIndex(FakeIndex):
    """Stands in for ``pinecone.IndexAsyncio``."""

    def __init__(self, host=FAKE_HOST):
        super().__init__(host)
        self.entered = False

    async def upsert(self, *args, **kwargs):
        return FakeIndex.upsert(self, *args, **kwargs)

    async def query(self, *args, **kwargs):
        return FakeIndex.query(self, *args, **kwargs)

    async def delete(self, *args, **kwargs):
        return FakeIndex.delete(self, *args, **kwargs)

    async def fetch(self, *args, **kwargs):
        return FakeIndex.fetch(self, *args, **kwargs)

    async def update(self, *args, **kwargs):
        return FakeIndex.update(self, *args, **kwargs)

    async def describe_index_stats(self, *args, **kwargs):
        return FakeIndex.describe_index_stats(self, *args, **kwargs)

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        self.entered = False
        return None


@pytest.fixture
def fake_index():
    return FakeIndex()


@pytest.fixture
def fake_async_index():
    return FakeAsyncIndex()
