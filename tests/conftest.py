"""Pytest configuration and fixtures."""
import json
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import httpx
import pytest

from chatrelay.app.dependencies import AppState, app_state
from chatrelay.core.profile import Profile


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    mock = Mock()
    mock.ping.return_value = True
    mock.get.return_value = None
    mock.set.return_value = True
    return mock


@pytest.fixture
def profile():
    """Profile with a key for every provider."""
    return Profile(
        user_id="user-1",
        anthropic_api_key="sk-ant-test",
        groq_api_key="gsk-test",
        mistral_api_key="mistral-test",
        openai_api_key="sk-openai-test",
        openai_organization_id="org-test",
        perplexity_api_key="pplx-test",
    )


def sse_body(chunks: List[Any], done: bool = True) -> bytes:
    """Encode chunks the way OpenAI-compatible providers stream them."""
    lines = [f"data: {json.dumps(chunk)}\n\n" for chunk in chunks]
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode()


class UpstreamRecorder:
    """Records requests sent to a stubbed provider."""

    def __init__(self, status_code: int = 200, body: bytes = b"", stream=None):
        self.status_code = status_code
        self.body = body
        self.stream = stream
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.stream is not None:
            return httpx.Response(
                self.status_code,
                content=self.stream(),
                headers={"content-type": "text/event-stream"},
            )
        return httpx.Response(
            self.status_code,
            content=self.body,
            headers={"content-type": "text/event-stream" if self.status_code < 400 else "application/json"},
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_json(self) -> Optional[Dict[str, Any]]:
        if not self.requests:
            return None
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream_stream():
    """Factory for a provider stub streaming the given chunks."""

    def _make(chunks: List[Any], done: bool = True) -> UpstreamRecorder:
        return UpstreamRecorder(body=sse_body(chunks, done=done))

    return _make


@pytest.fixture
def upstream_error():
    """Factory for a provider stub rejecting the request."""

    def _make(status_code: int, error: Dict[str, Any]) -> UpstreamRecorder:
        return UpstreamRecorder(status_code=status_code, body=json.dumps(error).encode())

    return _make


@pytest.fixture
def upstream_broken():
    """Provider stub that streams one chunk, then drops the connection."""

    async def _stream():
        yield b'data: {"id":"chunk-1"}\n\n'
        raise httpx.ReadError("connection reset by peer")

    return UpstreamRecorder(stream=_stream)


@pytest.fixture
def reset_app_state():
    """Restore global app state after a test mutates it."""
    saved = {name: getattr(app_state, name) for name in AppState.__dataclass_fields__}
    yield app_state
    for name, value in saved.items():
        setattr(app_state, name, value)
