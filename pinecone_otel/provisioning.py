"""Live index provisioning for recording new HTTP fixtures.

Only used when cassettes are being (re-)recorded against a real Pinecone
project. Creates the test index if needed, waits until it is ready, seeds a
namespace with a known set of vectors and waits until they are queryable.
"""

import logging
from typing import Any, Dict, List

from pinecone import ServerlessSpec

from .retry import INDEX_READY_POLICY, VECTORS_READY_POLICY, RetryPolicy

logger = logging.getLogger(__name__)

TEST_INDEX_NAME = "pinecone-instrumentation-test"
TEST_NAMESPACE = "ns1"
DIMENSION = 8

SEED_VECTORS: List[Dict[str, Any]] = [
    {"id": "vec1", "values": [0.1] * DIMENSION},
    {"id": "vec2", "values": [0.2] * DIMENSION},
    {"id": "vec3", "values": [0.3] * DIMENSION, "metadata": {"test_meta": 42}},
    {"id": "vec4", "values": [0.4] * DIMENSION},
]


def _already_exists(error: Exception) -> bool:
    return getattr(error, "status", None) == 409 or "ALREADY_EXISTS" in str(error)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def ensure_index(
    pc: Any,
    name: str = TEST_INDEX_NAME,
    dimension: int = DIMENSION,
    metric: str = "cosine",
    cloud: str = "aws",
    region: str = "us-east-1",
) -> bool:
    """Create a serverless index, tolerating one that already exists.

    Returns:
        True if the index was created, False if it was already there.
    """
    try:
        pc.create_index(
            name=name,
            dimension=dimension,
            metric=metric,
            spec=ServerlessSpec(cloud=cloud, region=region),
        )
    except Exception as e:
        if not _already_exists(e):
            raise
        logger.info("Index %s already exists", name)
        return False
    logger.info("Index %s created", name)
    return True


def wait_for_index_ready(pc: Any, name: str = TEST_INDEX_NAME, policy: RetryPolicy = INDEX_READY_POLICY):
    def ready():
        return bool(_field(_field(pc.describe_index(name), "status"), "ready"))

    return policy.poll(ready, f"index {name}")


def seed_vectors(index: Any, namespace: str = TEST_NAMESPACE, vectors: List[Dict[str, Any]] = None):
    return index.upsert(vectors=vectors or SEED_VECTORS, namespace=namespace)


def wait_for_vectors(
    index: Any,
    namespace: str = TEST_NAMESPACE,
    query_vector: List[float] = None,
    policy: RetryPolicy = VECTORS_READY_POLICY,
):
    """Poll a top-1 query until the namespace returns a match."""
    query_vector = query_vector or [0.3] * DIMENSION

    def queryable():
        result = index.query(
            vector=query_vector, top_k=1, namespace=namespace, include_values=False
        )
        return bool(_field(result, "matches"))

    return policy.poll(queryable, f"vectors in namespace {namespace}")


def provision_test_index(
    pc: Any,
    name: str = TEST_INDEX_NAME,
    namespace: str = TEST_NAMESPACE,
    index_policy: RetryPolicy = INDEX_READY_POLICY,
    vectors_policy: RetryPolicy = VECTORS_READY_POLICY,
):
    """Create, await and seed the index the recorded fixtures are captured against.

    Args:
        index_policy: Polling used while the index becomes ready.
        vectors_policy: Polling used while the seeded vectors become queryable.

    Returns:
        The (untraced) index handle.
    """
    ensure_index(pc, name)
    wait_for_index_ready(pc, name, policy=index_policy)
    index = pc.Index(name)
    seed_vectors(index, namespace)
    wait_for_vectors(index, namespace, policy=vectors_policy)
    return index


def drop_index(pc: Any, name: str = TEST_INDEX_NAME):
    pc.delete_index(name)
    logger.info("Index %s deleted", name)
