from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from opentelemetry.trace import StatusCode

from pinecone_otel.instrumentors.base import IndexOperationWrapper, build_wrappers
from pinecone_otel.semconv import Operations

INSTANCE = SimpleNamespace(index_name="docs", index_host="docs-abc.svc.pinecone.io")


def test_build_wrappers_covers_every_operation(tracing):
    wrappers = build_wrappers(tracing)

    assert set(wrappers) == set(Operations.ALL)
    assert wrappers["query"].span_name == "pinecone.query"
    assert set(build_wrappers(tracing, ("delete",))) == {"delete"}


def test_sync_call_returns_result_unchanged(tracing, span_exporter):
    response = object()
    wrapped = MagicMock(return_value=response)
    wrapper = IndexOperationWrapper(tracing, "delete")

    result = wrapper(wrapped, INSTANCE, ("vec1",), {"namespace": "ns1"})

    assert result is response
    wrapped.assert_called_once_with("vec1", namespace="ns1")
    (span,) = span_exporter.get_finished_spans()
    assert span.attributes["server.address"] == "docs-abc.svc.pinecone.io"
    assert span.attributes["db.vector.namespace"] == "ns1"


def test_request_extraction_failure_still_traces(tracing, span_exporter, caplog):
    wrapper = IndexOperationWrapper(tracing, "upsert")

    with patch(
        "pinecone_otel.instrumentors.base.attrs.request_attributes",
        side_effect=ValueError("bad vectors"),
    ):
        assert wrapper(lambda *a, **k: "ok", INSTANCE, (), {}) == "ok"

    assert "Failed to extract request attributes for 'pinecone.upsert'" in caplog.text
    (span,) = span_exporter.get_finished_spans()
    assert span.attributes["db.system"] == "Pinecone"
    assert span.status.status_code == StatusCode.OK


def test_response_extraction_failure_still_ok(tracing, span_exporter, caplog):
    wrapper = IndexOperationWrapper(tracing, "query")

    with patch(
        "pinecone_otel.instrumentors.base.attrs.response_attributes",
        side_effect=TypeError("odd response"),
    ):
        wrapper(lambda **k: {"matches": []}, INSTANCE, (), {"top_k": 1})

    assert "Failed to record response for 'pinecone.query'" in caplog.text
    (span,) = span_exporter.get_finished_spans()
    assert span.status.status_code == StatusCode.OK


@pytest.mark.asyncio
async def test_coroutine_function_dispatches_to_async_path(tracing, span_exporter):
    async def query(**kwargs):
        assert len(span_exporter.get_finished_spans()) == 0
        return {"matches": [{"id": "vec1", "score": 0.5}]}

    wrapper = IndexOperationWrapper(tracing, "query")
    result = await wrapper(query, INSTANCE, (), {"top_k": 1})

    assert result["matches"][0]["id"] == "vec1"
    (span,) = span_exporter.get_finished_spans()
    assert [event.name for event in span.events] == [
        "pinecone.query.request",
        "pinecone.query.result",
        "pinecone.query.result.0",
    ]
