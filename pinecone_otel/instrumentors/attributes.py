"""Request/response attribute extraction and query events for Pinecone index calls.

Pinecone hands back OpenAPI model objects from some calls and dataclasses or
plain dicts from others, depending on the client version, so every lookup goes
through `_field`, which accepts all three.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..semconv import EventAttributes, Events, Operations, SpanAttributes

logger = logging.getLogger(__name__)

_PRIMITIVES = (str, bool, int, float)


def safe_json_dumps(obj: Any) -> str:
    """Serialize `obj` to JSON, falling back to ``str`` for unknown types."""
    try:
        return json.dumps(obj, default=str)
    except (TypeError, ValueError):
        return str(obj)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _arg(args: Sequence, kwargs: Dict, position: int, name: str, default: Any = None) -> Any:
    if name in kwargs:
        return kwargs[name]
    if len(args) > position:
        return args[position]
    return default


def to_attribute_value(value: Any) -> Any:
    """Coerce `value` into something a span attribute accepts, or None to skip it."""
    if value is None:
        return None
    if isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, (list, tuple)):
        items = list(value)
        if items and all(isinstance(v, _PRIMITIVES) for v in items):
            if len({type(v) for v in items}) == 1:
                return items
            if all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in items):
                return [float(v) for v in items]
        return safe_json_dumps(items)
    return safe_json_dumps(value)


def clean_attributes(attributes: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for key, value in attributes.items():
        value = to_attribute_value(value)
        if value is not None:
            cleaned[key] = value
    return cleaned


def index_host(index: Any) -> Optional[str]:
    """Host of a Pinecone data-plane index, if the client exposes it."""
    for holder in ("_config", "config"):
        config = getattr(index, holder, None)
        host = getattr(config, "host", None)
        if isinstance(host, str) and host:
            return host
    return None


def index_name_from_host(host: Optional[str]) -> Optional[str]:
    """Recover the index name from a host like ``my-index-abc123.svc.region.pinecone.io``."""
    if not host:
        return None
    label = host.split("://", 1)[-1].split(".", 1)[0]
    if "-" not in label:
        return label
    return label.rsplit("-", 1)[0]


def _vector_dimensions(vector: Any) -> Optional[int]:
    if isinstance(vector, (tuple, list)) and len(vector) >= 2 and isinstance(vector[0], str):
        values = vector[1]
    else:
        values = _field(vector, "values")
    if isinstance(values, (list, tuple)):
        return len(values)
    return None


def common_attributes(
    vendor: str,
    operation: str,
    index_name: Optional[str],
    host: Optional[str],
    namespace: Optional[str],
) -> Dict[str, Any]:
    return clean_attributes(
        {
            SpanAttributes.VECTOR_DB_VENDOR: vendor,
            SpanAttributes.VECTOR_DB_OPERATION: operation,
            SpanAttributes.VECTOR_DB_INDEX: index_name,
            SpanAttributes.SERVER_ADDRESS: host,
            SpanAttributes.VECTOR_DB_NAMESPACE: namespace,
        }
    )


def request_attributes(operation: str, args: Sequence, kwargs: Dict) -> Dict[str, Any]:
    """Operation specific attributes known before the call is made."""
    attributes: Dict[str, Any] = {}

    if operation == Operations.UPSERT:
        vectors = _arg(args, kwargs, 0, "vectors") or []
        attributes[SpanAttributes.UPSERT_COUNT] = len(vectors)
        if vectors:
            attributes[SpanAttributes.UPSERT_DIMENSIONS] = _vector_dimensions(vectors[0])

    elif operation == Operations.QUERY:
        attributes[SpanAttributes.QUERY_TOP_K] = kwargs.get("top_k")
        attributes[SpanAttributes.QUERY_INCLUDE_VALUES] = bool(kwargs.get("include_values"))
        attributes[SpanAttributes.QUERY_INCLUDE_METADATA] = bool(kwargs.get("include_metadata"))
        if kwargs.get("filter"):
            attributes[SpanAttributes.QUERY_FILTER] = safe_json_dumps(kwargs["filter"])

    elif operation == Operations.DELETE:
        ids = _arg(args, kwargs, 0, "ids")
        delete_all = _arg(args, kwargs, 1, "delete_all")
        attributes[SpanAttributes.DELETE_ALL] = bool(delete_all)
        if ids:
            attributes[SpanAttributes.DELETE_COUNT] = len(ids)
        if kwargs.get("filter"):
            attributes[SpanAttributes.QUERY_FILTER] = safe_json_dumps(kwargs["filter"])

    elif operation == Operations.FETCH:
        ids = _arg(args, kwargs, 0, "ids")
        if ids:
            attributes[SpanAttributes.FETCH_IDS_COUNT] = len(ids)

    elif operation == Operations.UPDATE:
        attributes[SpanAttributes.UPDATE_ID] = _arg(args, kwargs, 0, "id")
        values = _arg(args, kwargs, 1, "values")
        if values:
            attributes[SpanAttributes.UPDATE_HAS_VALUES] = True
            attributes[SpanAttributes.UPSERT_DIMENSIONS] = len(values)
        if kwargs.get("set_metadata"):
            attributes[SpanAttributes.UPDATE_HAS_METADATA] = True

    elif operation == Operations.DESCRIBE_INDEX_STATS:
        if kwargs.get("filter"):
            attributes[SpanAttributes.QUERY_FILTER] = safe_json_dumps(kwargs["filter"])

    return clean_attributes(attributes)


def namespace_of(operation: str, args: Sequence, kwargs: Dict) -> Optional[str]:
    positions = {
        Operations.UPSERT: 1,
        Operations.DELETE: 2,
        Operations.FETCH: 1,
    }
    if operation in positions:
        return _arg(args, kwargs, positions[operation], "namespace")
    return kwargs.get("namespace")


def response_attributes(operation: str, response: Any) -> Dict[str, Any]:
    """Operation specific attributes read off the call's return value."""
    attributes: Dict[str, Any] = {}

    if operation == Operations.QUERY:
        matches = _field(response, "matches")
        if matches is not None:
            attributes[SpanAttributes.RESULTS_COUNT] = len(matches)
        attributes[SpanAttributes.READ_UNITS] = _field(_field(response, "usage"), "read_units")

    elif operation == Operations.UPSERT:
        attributes[SpanAttributes.UPSERTED_COUNT] = _field(response, "upserted_count")

    elif operation == Operations.FETCH:
        vectors = _field(response, "vectors")
        if vectors is not None:
            attributes[SpanAttributes.RESULTS_COUNT] = len(vectors)

    elif operation == Operations.DESCRIBE_INDEX_STATS:
        attributes[SpanAttributes.STATS_TOTAL_COUNT] = _field(response, "total_vector_count")
        attributes[SpanAttributes.INDEX_DIMENSIONS] = _field(response, "dimension")
        namespaces = _field(response, "namespaces")
        if namespaces is not None:
            attributes[SpanAttributes.STATS_NAMESPACE_COUNT] = len(namespaces)

    return clean_attributes(attributes)


def query_request_event(kwargs: Dict) -> Dict[str, Any]:
    return clean_attributes(
        {
            EventAttributes.QUERY_TOP_K: kwargs.get("top_k"),
            EventAttributes.QUERY_INCLUDE_VALUES: bool(kwargs.get("include_values")),
            EventAttributes.QUERY_INCLUDE_METADATA: bool(kwargs.get("include_metadata")),
            EventAttributes.QUERY_ID: kwargs.get("id"),
            EventAttributes.QUERY_EMBEDDINGS_VECTOR: kwargs.get("vector"),
            EventAttributes.QUERY_METADATA_FILTER: safe_json_dumps(kwargs.get("filter") or {}),
        }
    )


def query_events(kwargs: Dict, response: Any) -> List[tuple]:
    """Ordered ``(name, attributes)`` pairs describing a query and its matches.

    The request event always comes first. Result events are only produced when
    the response carries a ``matches`` list: one summary event, then one event
    per match, each immediately followed by a metadata event when that match
    has metadata.
    """
    events = [(Events.QUERY_REQUEST, query_request_event(kwargs))]

    matches = _field(response, "matches")
    if matches is None:
        return events

    events.append(
        (
            Events.QUERY_RESULT,
            clean_attributes(
                {
                    EventAttributes.RESULT_NAMESPACE: _field(response, "namespace"),
                    EventAttributes.RESULT_READ_UNITS_CONSUMED: _field(
                        _field(response, "usage"), "read_units"
                    ),
                    EventAttributes.RESULT_MATCHES_LENGTH: len(matches),
                }
            ),
        )
    )

    for i, match in enumerate(matches):
        events.append(
            (
                Events.QUERY_MATCH.format(i=i),
                clean_attributes(
                    {
                        EventAttributes.RESULT_SCORE.format(i=i): _field(match, "score"),
                        EventAttributes.RESULT_ID.format(i=i): _field(match, "id"),
                        EventAttributes.RESULT_VALUES.format(i=i): _field(match, "values") or None,
                    }
                ),
            )
        )
        metadata = _field(match, "metadata")
        if metadata:
            events.append(
                (Events.QUERY_MATCH_METADATA.format(i=i), clean_attributes(dict(metadata)))
            )

    return events
