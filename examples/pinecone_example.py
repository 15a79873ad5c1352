"""Pinecone Instrumentation Example.

This example traces upserts, a query and namespace deletes against a
serverless Pinecone index. Every index returned by ``Pinecone.Index`` is
wrapped automatically once ``instrument()`` has run.

Requirements:
    pip install pinecone-otel-instrument
    export PINECONE_API_KEY=your_api_key
    export PINECONE_INDEX_HOST=your-index-abc1234.svc.aped-4627-b74a.pinecone.io
    export OTEL_EXPORTER_OTLP_ENDPOINT=http://localhost:4318/v1/traces
"""

import os
import sys

import pinecone_otel
from pinecone_otel import trace_operation

tracing = pinecone_otel.instrument(service_name="pinecone-example", fail_on_error=True)

from pinecone import Pinecone  # noqa: E402

api_key = os.getenv("PINECONE_API_KEY")
host = os.getenv("PINECONE_INDEX_HOST")
if not api_key or not host:
    print("ERROR: PINECONE_API_KEY and PINECONE_INDEX_HOST must be set")
    sys.exit(1)

index = Pinecone(api_key=api_key).Index(host=host)
docs = index.namespace("example")

try:
    with trace_operation(tracing, "load_and_search"):
        docs.upsert(
            [
                {"id": "doc1", "values": [0.1] * 8, "metadata": {"genre": "drama"}},
                {"id": "doc2", "values": [0.2] * 8},
            ]
        )
        results = docs.query(vector=[0.1] * 8, top_k=2, include_metadata=True)
        for match in results.matches:
            print(f"{match.id}: {match.score:.4f}")

    docs.delete_one("doc1")
    docs.delete_all()
finally:
    # Flush spans before the process exits
    tracing.shutdown()
