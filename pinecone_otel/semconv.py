"""Span and event attribute keys used by the Pinecone instrumentation.

Generic database keys follow the OpenTelemetry database conventions; vector
specific keys live under ``db.vector.*`` and query event payloads under
``db.pinecone.query.*``.
"""

from opentelemetry.semconv.attributes.error_attributes import ERROR_TYPE
from opentelemetry.semconv.attributes.server_attributes import SERVER_ADDRESS


class SpanAttributes:
    """Span-level attribute keys."""

    VECTOR_DB_VENDOR = "db.system"
    VECTOR_DB_OPERATION = "db.operation"
    VECTOR_DB_INDEX = "db.vector.index.name"
    VECTOR_DB_NAMESPACE = "db.vector.namespace"
    SERVER_ADDRESS = SERVER_ADDRESS
    ERROR_TYPE = ERROR_TYPE

    # query
    QUERY_TOP_K = "db.vector.query.top_k"
    QUERY_FILTER = "db.vector.query.filter"
    QUERY_INCLUDE_METADATA = "db.vector.query.include_metadata"
    QUERY_INCLUDE_VALUES = "db.vector.query.include_values"
    RESULTS_COUNT = "db.vector.results.count"
    READ_UNITS = "db.vector.usage.read_units"

    # upsert
    UPSERT_COUNT = "db.vector.upsert.count"
    UPSERT_DIMENSIONS = "db.vector.upsert.dimensions"
    UPSERTED_COUNT = "db.vector.upserted_count"

    # delete
    DELETE_COUNT = "db.vector.delete.count"
    DELETE_ALL = "db.vector.delete.all"

    # fetch / update
    FETCH_IDS_COUNT = "db.vector.fetch.ids_count"
    UPDATE_ID = "db.vector.update.id"
    UPDATE_HAS_METADATA = "db.vector.update.has_metadata"
    UPDATE_HAS_VALUES = "db.vector.update.has_values"

    # describe_index_stats
    STATS_TOTAL_COUNT = "db.vector.stats.total_count"
    STATS_NAMESPACE_COUNT = "db.vector.stats.namespace_count"
    INDEX_DIMENSIONS = "db.vector.index.dimensions"


class EventAttributes:
    """Attribute keys carried by query events.

    Per-match keys contain an ``{i}`` placeholder for the match position.
    """

    QUERY_TOP_K = "db.pinecone.query.top_k"
    QUERY_INCLUDE_VALUES = "db.pinecone.query.include_values"
    QUERY_INCLUDE_METADATA = "db.pinecone.query.include_metadata"
    QUERY_ID = "db.pinecone.query.id"
    QUERY_EMBEDDINGS_VECTOR = "db.pinecone.query.embeddings.vector"
    QUERY_METADATA_FILTER = "db.pinecone.query.metadata_filter"

    RESULT_NAMESPACE = "db.pinecone.query.result.namespace"
    RESULT_READ_UNITS_CONSUMED = "db.pinecone.query.result.read_units_consumed"
    RESULT_MATCHES_LENGTH = "db.pinecone.query.result.matches_length"

    RESULT_SCORE = "db.pinecone.query.result.{i}.score"
    RESULT_ID = "db.pinecone.query.result.{i}.id"
    RESULT_VALUES = "db.pinecone.query.result.{i}.values"


class Events:
    """Event names emitted on query spans."""

    QUERY_REQUEST = "pinecone.query.request"
    QUERY_RESULT = "pinecone.query.result"
    QUERY_MATCH = "pinecone.query.result.{i}"
    QUERY_MATCH_METADATA = "pinecone.query.result.{i}.metadata"


class Operations:
    """Traced index operations and their span names."""

    UPSERT = "upsert"
    QUERY = "query"
    DELETE = "delete"
    FETCH = "fetch"
    UPDATE = "update"
    DESCRIBE_INDEX_STATS = "describe_index_stats"

    ALL = (UPSERT, QUERY, DELETE, FETCH, UPDATE, DESCRIBE_INDEX_STATS)

    @staticmethod
    def span_name(operation: str) -> str:
        return f"pinecone.{operation}"
