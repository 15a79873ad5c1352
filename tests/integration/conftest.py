"""Fixtures for tests that talk to Pinecone through recorded HTTP exchanges.

By default every test replays ``tests/cassettes/<test name>.yaml`` and no
request leaves the process. With ``RECORD_MODE=NEW`` and ``PINECONE_API_KEY``
set, a live serverless index is provisioned and seeded for the session, new
interactions are appended to the cassettes and the index is dropped at the end.
"""

from pathlib import Path
from urllib.parse import urlparse

import pytest
from pinecone import Pinecone

from pinecone_otel.instrumentors import TracedIndex
from pinecone_otel.instrumentors.attributes import index_host as host_of
from pinecone_otel.provisioning import TEST_INDEX_NAME, drop_index, provision_test_index
from pinecone_otel.recording import RecordMode, api_key_for, build_recorder, use_cassette
from pinecone_otel.retry import INDEX_READY_POLICY, VECTORS_READY_POLICY

CASSETTE_DIR = Path(__file__).parent.parent / "cassettes"
REPLAY_HOST = "pinecone-instrumentation-test-abc1234.svc.aped-4627-b74a.pinecone.io"


@pytest.fixture(scope="session")
def record_mode():
    return RecordMode.from_env()


@pytest.fixture(scope="session")
def pinecone_client(record_mode):
    return Pinecone(api_key=api_key_for(record_mode))


@pytest.fixture(scope="session")
def live_host(record_mode, pinecone_client):
    """Host of the freshly provisioned index; None when replaying."""
    if not record_mode.is_recording:
        yield None
        return
    index = provision_test_index(
        pinecone_client, index_policy=INDEX_READY_POLICY, vectors_policy=VECTORS_READY_POLICY
    )
    yield urlparse(host_of(index)).netloc or host_of(index)
    drop_index(pinecone_client)


@pytest.fixture(scope="session")
def recorder(record_mode, live_host):
    aliases = {live_host: REPLAY_HOST} if live_host else None
    return build_recorder(CASSETTE_DIR, record_mode, host_aliases=aliases)


@pytest.fixture(scope="session")
def index_host(live_host):
    return live_host or REPLAY_HOST


@pytest.fixture
def cassette(recorder, request):
    with use_cassette(recorder, request.node.name) as cass:
        yield cass


@pytest.fixture
def pc_index(pinecone_client, index_host, tracing):
    return TracedIndex(pinecone_client.Index(host=index_host), tracing, index_name=TEST_INDEX_NAME)


@pytest.fixture
def skip_when_recording(record_mode):
    if record_mode.is_recording:
        pytest.skip("only meaningful against existing fixtures")
