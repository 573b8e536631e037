"""Streaming chat-completion client shared by all providers.

Every supported provider streams server-sent events whose ``data:``
lines carry one JSON chunk each:

- OpenAI-compatible APIs (OpenAI, Groq, Mistral, Perplexity) send
  ``data: {...}`` lines terminated by ``data: [DONE]``
- Anthropic sends ``event: <type>`` / ``data: {...}`` pairs, where the
  data object repeats the event type in its ``type`` field

Chunks are yielded as parsed objects without interpreting their shape.
"""
import json
import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from chatrelay.core.errors import ProviderAPIError, StreamFailure

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"


def _error_message(body: bytes, status_code: int) -> str:
    """Extract a human-readable message from a provider error body."""
    text = body.decode("utf-8", errors="replace").strip()
    try:
        data = json.loads(text) if text else {}
    except json.JSONDecodeError:
        return text or f"Upstream returned {status_code}"

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])
        if data.get("detail"):
            return str(data["detail"])
    return text or f"Upstream returned {status_code}"


class UpstreamStream:
    """One streaming POST to a provider.

    ``open()`` waits for the response headers so that rejections surface
    before anything is sent to the client. ``chunks()`` then yields the
    provider's chunks in arrival order.
    """

    def __init__(
        self,
        url: str,
        headers: Dict[str, str],
        payload: Dict[str, Any],
        timeout_s: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            url: Provider completion endpoint
            headers: Request headers including auth
            payload: JSON request body
            timeout_s: Read timeout between chunks in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self.headers = headers
        self.payload = payload
        self.timeout_s = timeout_s
        self.transport = transport
        self.status_code: Optional[int] = None
        self._client: Optional[httpx.AsyncClient] = None
        self._response: Optional[httpx.Response] = None

    async def open(self) -> "UpstreamStream":
        """Send the request and wait for the provider to accept it.

        Raises:
            ProviderAPIError: If the provider answers >= 400 or is unreachable
        """
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s, connect=10.0),
            transport=self.transport,
        )
        request = self._client.build_request(
            "POST", self.url, json=self.payload, headers=self.headers
        )

        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as e:
            await self.aclose()
            raise ProviderAPIError(f"Network error: {e}", 502) from e

        self.status_code = response.status_code
        if response.status_code >= 400:
            try:
                body = await response.aread()
            finally:
                await response.aclose()
                await self.aclose()
            raise ProviderAPIError(_error_message(body, response.status_code), response.status_code)

        self._response = response
        return self

    async def chunks(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield each upstream chunk as a parsed JSON object.

        Raises:
            StreamFailure: If the connection breaks, a chunk is not valid
                JSON, or the provider reports an error mid-stream
        """
        if self._response is None:
            raise RuntimeError("UpstreamStream.open() must be awaited first")

        try:
            async for line in self._response.aiter_lines():
                # Only data lines carry chunks; skip event names, comments, blanks
                if not line.startswith("data:"):
                    continue

                data_str = line[5:].strip()
                if not data_str or data_str == DONE_SENTINEL:
                    continue

                try:
                    chunk = json.loads(data_str)
                except json.JSONDecodeError as e:
                    raise StreamFailure(f"Malformed chunk from upstream: {e}") from e

                if isinstance(chunk, dict) and chunk.get("error"):
                    error = chunk["error"]
                    message = error.get("message") if isinstance(error, dict) else str(error)
                    raise StreamFailure(f"Upstream error during stream: {message}")

                yield chunk
        except httpx.HTTPError as e:
            raise StreamFailure(f"Upstream stream interrupted: {e}") from e

    async def aclose(self) -> None:
        """Release the upstream connection."""
        if self._response is not None:
            await self._response.aclose()
            self._response = None
        if self._client is not None:
            await self._client.aclose()
            self._client = None
