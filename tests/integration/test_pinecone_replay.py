"""Traced Pinecone calls against recorded HTTP exchanges.

Each test replays the cassette named after it. The cassettes were captured
from an index seeded with ``provisioning.SEED_VECTORS`` in namespace ``ns1``.
"""

import pytest
from opentelemetry.trace import StatusCode
from pinecone import Pinecone
from vcr.errors import CannotOverwriteExistingCassetteException

from pinecone_otel.instrumentors import PineconeInstrumentor, TracedIndex

QUERY = {"vector": [0.3] * 8, "top_k": 3, "include_values": True, "include_metadata": True}


def _span_names(exporter):
    return [span.name for span in exporter.get_finished_spans()]


def _matches(response):
    return [(match.id, match.score) for match in response.matches]


@pytest.mark.usefixtures("cassette")
def test_upsert_creates_one_span(pc_index, span_exporter):
    response = pc_index.upsert(vectors=[{"id": "vec5", "values": [0.5] * 8}])

    assert response.upserted_count == 1
    (span,) = span_exporter.get_finished_spans()
    assert span.name == "pinecone.upsert"
    assert span.attributes["db.system"] == "Pinecone"
    assert span.attributes["db.vector.index.name"] == "pinecone-instrumentation-test"
    assert span.attributes["db.vector.upsert.count"] == 1
    assert span.attributes["db.vector.upserted_count"] == 1
    assert span.status.status_code == StatusCode.OK


@pytest.mark.usefixtures("cassette")
def test_query_records_match_events(pc_index, span_exporter):
    response = pc_index.namespace("ns1").query(**QUERY)

    assert [match.id for match in response.matches] == ["vec2", "vec3", "vec4"]
    (span,) = span_exporter.get_finished_spans()
    assert span.attributes["db.system"] == "Pinecone"
    assert span.attributes["db.vector.namespace"] == "ns1"
    assert span.attributes["db.vector.results.count"] == 3
    assert [event.name for event in span.events] == [
        "pinecone.query.request",
        "pinecone.query.result",
        "pinecone.query.result.0",
        "pinecone.query.result.1",
        "pinecone.query.result.1.metadata",
        "pinecone.query.result.2",
    ]
    request_event, result_event = span.events[0], span.events[1]
    assert request_event.attributes["db.pinecone.query.top_k"] == 3
    assert result_event.attributes["db.pinecone.query.result.namespace"] == "ns1"
    assert result_event.attributes["db.pinecone.query.result.matches_length"] == 3
    assert span.events[3].attributes["db.pinecone.query.result.1.id"] == "vec3"
    assert span.events[4].attributes["test_meta"] == 42


@pytest.mark.usefixtures("cassette")
def test_namespace_deletes(pc_index, span_exporter):
    ns = pc_index.namespace("ns1")

    ns.delete_one("vec1")
    ns.delete_many(["vec2", "vec3"])
    ns.delete_all()

    spans = span_exporter.get_finished_spans()
    assert [span.name for span in spans] == ["pinecone.delete"] * 3
    assert all(span.attributes["db.system"] == "Pinecone" for span in spans)
    assert [span.attributes.get("db.vector.delete.count") for span in spans] == [1, 2, None]
    assert spans[2].attributes["db.vector.delete.all"] is True

    span_exporter.clear()
    assert len(span_exporter.get_finished_spans()) == 0


@pytest.mark.usefixtures("cassette")
def test_replayed_query_is_deterministic(pc_index, span_exporter):
    ns = pc_index.namespace("ns1")

    first = ns.query(**QUERY)
    second = ns.query(**QUERY)

    assert _matches(first) == _matches(second)
    earlier, later = span_exporter.get_finished_spans()
    assert dict(earlier.attributes) == dict(later.attributes)
    assert [(e.name, dict(e.attributes)) for e in earlier.events] == [
        (e.name, dict(e.attributes)) for e in later.events
    ]


@pytest.mark.usefixtures("cassette", "skip_when_recording")
def test_rotated_credentials_match_same_fixture(pc_index, index_host, tracing, span_exporter):
    rotated = TracedIndex(
        Pinecone(api_key="rotated-key").Index(host=index_host),
        tracing,
        index_name="pinecone-instrumentation-test",
    )

    original = pc_index.namespace("ns1").query(**QUERY)
    replayed = rotated.namespace("ns1").query(**QUERY)

    assert _matches(original) == _matches(replayed)
    assert _span_names(span_exporter) == ["pinecone.query", "pinecone.query"]


@pytest.mark.usefixtures("cassette")
def test_auto_instrumented_client(pinecone_client, index_host, tracing, span_exporter):
    instrumentor = PineconeInstrumentor(tracing)
    assert instrumentor.instrument() is True
    try:
        index = pinecone_client.Index(host=index_host)
        assert isinstance(index, TracedIndex)
        index.query(namespace="ns1", **QUERY)
    finally:
        instrumentor.uninstrument()

    (span,) = span_exporter.get_finished_spans()
    assert span.name == "pinecone.query"
    assert span.attributes["db.vector.index.name"] == "pinecone-instrumentation-test"
    assert len(span.events) == 6


@pytest.mark.usefixtures("cassette", "skip_when_recording")
def test_unrecorded_request_fails_span(pc_index, span_exporter):
    with pytest.raises(CannotOverwriteExistingCassetteException):
        pc_index.namespace("ns2").query(vector=[0.9] * 8, top_k=1)

    (span,) = span_exporter.get_finished_spans()
    assert span.name == "pinecone.query"
    assert span.status.status_code == StatusCode.ERROR
    assert span.attributes["error.type"] == "CannotOverwriteExistingCassetteException"
    assert [event.name for event in span.events] == ["exception"]
