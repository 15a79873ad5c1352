"""Record/replay of Pinecone HTTP traffic for deterministic tests.

A thin layer over vcrpy. In replay mode (the default) every outbound request
must match an interaction already stored in a cassette, otherwise vcrpy raises
instead of reaching the network. In record mode (``RECORD_MODE=NEW``) requests
without a recorded counterpart go to the live service and are appended to the
cassette.

Requests are matched on method, URL and JSON body, never on headers, so a
cassette recorded with one API key replays with any other. Credential headers
are stripped before anything is written to disk, and live index hosts can be
aliased to a fixed placeholder host.
"""

import enum
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

import vcr

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

RECORD_MODE_ENV = "RECORD_MODE"
API_KEY_ENV = "PINECONE_API_KEY"
REPLAY_API_KEY = "test"

SENSITIVE_HEADERS = ("api-key", "authorization", "x-pinecone-api-key")
MATCH_ON = ("method", "scheme", "host", "port", "path", "query", "json_body")


class RecordMode(enum.Enum):
    """Whether the test run replays cassettes or records new interactions."""

    REPLAY = "none"
    RECORD = "new_episodes"

    @classmethod
    def from_env(cls) -> "RecordMode":
        if os.getenv(RECORD_MODE_ENV, "").upper() == "NEW":
            return cls.RECORD
        return cls.REPLAY

    @property
    def is_recording(self) -> bool:
        return self is RecordMode.RECORD


def api_key_for(mode: RecordMode) -> str:
    """API key the client under test should be built with."""
    if not mode.is_recording:
        return REPLAY_API_KEY
    api_key = os.getenv(API_KEY_ENV)
    if not api_key:
        raise ConfigurationError(f"{API_KEY_ENV} must be set when {RECORD_MODE_ENV}=NEW")
    return api_key


def sanitize_request(request: Any, headers: Iterable[str] = SENSITIVE_HEADERS) -> Any:
    """Drop credential headers from a request before it is persisted."""
    blocked = {name.lower() for name in headers}
    request.headers = {
        name: value for name, value in request.headers.items() if name.lower() not in blocked
    }
    return request


def alias_hosts(request: Any, aliases: Dict[str, str]) -> Any:
    """Rewrite live index hosts to stable placeholders.

    Serverless index hosts embed a project-specific suffix, so fixtures are
    stored under a fixed host and replay does not depend on which project
    recorded them.
    """
    for real, placeholder in aliases.items():
        request.uri = request.uri.replace(f"//{real}", f"//{placeholder}", 1)
    return request


def _request_preparer(host_aliases: Optional[Dict[str, str]]) -> Callable[[Any], Any]:
    def prepare(request):
        request = sanitize_request(request)
        if host_aliases:
            request = alias_hosts(request, host_aliases)
        return request

    return prepare


def _decode_body(body: Union[bytes, str, None]) -> Any:
    if body is None:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return body


def json_body(r1: Any, r2: Any):
    """vcrpy matcher comparing request bodies as parsed JSON.

    Key order and whitespace differences between client versions do not
    affect the match; non-JSON bodies are compared as text.
    """
    left, right = _decode_body(r1.body), _decode_body(r2.body)
    assert left == right, f"{left!r} != {right!r}"


def build_recorder(
    cassette_dir: Union[str, Path],
    mode: RecordMode = None,
    host_aliases: Optional[Dict[str, str]] = None,
) -> vcr.VCR:
    """Create a vcrpy recorder configured for Pinecone traffic.

    Args:
        cassette_dir: Directory holding the YAML cassettes.
        mode: Replay or record; read from ``RECORD_MODE`` when omitted.
        host_aliases: Live host to placeholder host, applied to every request
            before it is matched or written.
    """
    mode = mode or RecordMode.from_env()
    recorder = vcr.VCR(
        cassette_library_dir=str(cassette_dir),
        serializer="yaml",
        record_mode=mode.value,
        match_on=list(MATCH_ON),
        filter_headers=list(SENSITIVE_HEADERS),
        before_record_request=_request_preparer(host_aliases),
        decode_compressed_response=True,
    )
    recorder.register_matcher("json_body", json_body)
    logger.debug("Cassettes in %s, record mode %s", cassette_dir, mode.value)
    return recorder


def use_cassette(recorder: vcr.VCR, name: str):
    """Context manager replaying (or recording) ``<name>.yaml``.

    A recorded interaction may be played back any number of times, so issuing
    the same request twice in one test yields the same response twice.
    """
    return recorder.use_cassette(f"{name}.yaml", allow_playback_repeats=True)
