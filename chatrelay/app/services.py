"""Relay service: one conversation in, one provider stream out."""
import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional, Union

import httpx

from chatrelay.adapters.llm.base import ProviderAdapter
from chatrelay.adapters.llm.stream import UpstreamStream
from chatrelay.app.schemas import ConversationRequest
from chatrelay.core.credentials import check_api_key
from chatrelay.core.errors import (
    ErrorCode,
    InvalidModelError,
    ProfileNotFoundError,
    RelayException,
    StreamFailure,
    UpstreamStatus,
)
from chatrelay.core.limits import get_max_output_tokens
from chatrelay.core.logging import structured_logger
from chatrelay.core.profile import Profile
from chatrelay.metrics.prometheus import (
    errors_total,
    request_latency_ms,
    requests_total,
    stream_chunks_total,
)

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"


class RelayState(str, Enum):
    """Lifecycle of a single relay."""

    IDLE = "Idle"
    CREDENTIAL_RESOLVED = "CredentialResolved"
    REQUEST_SENT = "RequestSent"
    STREAMING = "Streaming"
    CLOSED = "Closed"
    ABORTED = "Aborted"
    REJECTED = "Rejected"


@dataclass
class RelayError:
    """Failure before any byte reached the client."""

    code: ErrorCode
    status_code: int
    message: str
    upstream_status: Optional[int] = None
    state: RelayState = RelayState.REJECTED

    def to_body(self) -> Dict[str, str]:
        return {"message": self.message}


@dataclass
class RelayStream:
    """Provider accepted the request; events are ready to be relayed."""

    request_id: str
    provider: str
    model: str
    events: AsyncIterator[str]
    context: "RelayContext"
    upstream: UpstreamStream

    async def aclose(self) -> None:
        """Release the upstream connection, whether or not events were pulled."""
        await self.upstream.aclose()


RelayResult = Union[RelayStream, RelayError]


@dataclass
class RelayContext:
    """Per-request bookkeeping shared by setup and streaming."""

    request_id: str
    provider: str
    model: str
    start_time: float = field(default_factory=time.time)
    state: RelayState = RelayState.IDLE
    chunks: int = 0
    user_id: Optional[str] = None
    upstream_status: Optional[int] = None

    @property
    def latency_ms(self) -> int:
        return int((time.time() - self.start_time) * 1000)


def format_event(chunk: Any) -> str:
    """Serialize one upstream chunk as a server-sent event frame."""
    return f"data: {json.dumps(chunk, separators=(',', ':'), ensure_ascii=False)}\n\n"


def map_relay_error(exc: BaseException, display_name: str) -> RelayError:
    """Map a setup failure to the error returned to the client.

    Args:
        exc: Exception raised before streaming started
        display_name: Provider name used in credential messages

    Returns:
        RelayError with code, HTTP status and user-facing message
    """
    if isinstance(exc, InvalidModelError):
        return RelayError(ErrorCode.INVALID_MODEL, 400, exc.message)

    if isinstance(exc, ProfileNotFoundError):
        return RelayError(ErrorCode.UNAUTHORIZED, exc.status_code or 401, exc.message)

    if isinstance(exc, RelayException):
        message = exc.message
        status_code = exc.status_code
    else:
        message = str(exc)
        status_code = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    message = message or DEFAULT_ERROR_MESSAGE
    status_code = status_code or 500

    if "api key not found" in message.lower():
        return RelayError(
            ErrorCode.MISSING_CREDENTIAL,
            status_code,
            f"{display_name} API Key not found. Please set it in your profile settings.",
        )

    if status_code == 401:
        return RelayError(
            ErrorCode.INVALID_CREDENTIAL,
            status_code,
            f"{display_name} API Key is incorrect. Please fix it in your profile settings.",
            upstream_status=401,
        )

    return RelayError(ErrorCode.UPSTREAM_ERROR, status_code, message, upstream_status=status_code)


def _log_and_metric_relay(
    ctx: RelayContext,
    outcome: str,
    error_code: Optional[str] = None,
    level: str = "INFO",
) -> None:
    """Log and record metrics for a relay that reached a terminal state."""
    requests_total.labels(provider=ctx.provider, outcome=outcome).inc()
    request_latency_ms.labels(provider=ctx.provider).observe(ctx.latency_ms)

    if error_code:
        errors_total.labels(
            provider=ctx.provider,
            error_code=error_code,
            upstream_status=UpstreamStatus.normalize(ctx.upstream_status),
        ).inc()

    structured_logger.log_relay(
        request_id=ctx.request_id,
        provider=ctx.provider,
        model=ctx.model,
        final_state=ctx.state.value,
        outcome=outcome,
        error_code=error_code,
        upstream_status=ctx.upstream_status,
        chunks=ctx.chunks,
        latency_ms=ctx.latency_ms,
        user_id=ctx.user_id,
        level=level,
    )


async def _relay_events(upstream: UpstreamStream, ctx: RelayContext) -> AsyncIterator[str]:
    """Re-emit upstream chunks as events, in order, one at a time.

    Raises:
        StreamFailure: If the upstream breaks mid-stream. The response is
            already committed, so the transport aborts the connection.
    """
    ctx.state = RelayState.STREAMING
    try:
        async for chunk in upstream.chunks():
            ctx.chunks += 1
            stream_chunks_total.labels(provider=ctx.provider).inc()
            yield format_event(chunk)
        ctx.state = RelayState.CLOSED
        _log_and_metric_relay(ctx, "success")
    except StreamFailure as e:
        ctx.state = RelayState.ABORTED
        logger.warning(f"Relay {ctx.request_id} aborted after {ctx.chunks} chunk(s): {e.message}")
        _log_and_metric_relay(ctx, "error", ErrorCode.STREAM_FAILURE.value, level="ERROR")
        raise
    except Exception as e:
        ctx.state = RelayState.ABORTED
        logger.error(f"Relay {ctx.request_id} aborted by unexpected error: {e}", exc_info=True)
        _log_and_metric_relay(ctx, "error", ErrorCode.STREAM_FAILURE.value, level="ERROR")
        raise StreamFailure(f"Upstream stream failed: {e}") from e
    finally:
        if ctx.state is RelayState.STREAMING:
            # Client went away; stop consuming upstream
            ctx.state = RelayState.ABORTED
            _log_and_metric_relay(ctx, "cancelled", level="WARNING")
        await upstream.aclose()


async def open_relay(
    adapter: ProviderAdapter,
    conversation: ConversationRequest,
    get_profile: Callable[[], Profile],
    request_id: str,
    limits: Optional[Mapping[str, Mapping[str, int]]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RelayResult:
    """Validate, resolve the credential and open the provider stream.

    Nothing is sent to the client here: every failure comes back as a
    RelayError, and success returns a RelayStream whose events have not
    been pulled yet.

    Args:
        adapter: Provider adapter record
        conversation: Parsed request payload
        get_profile: Resolves the caller's profile
        request_id: Request identifier for logs
        limits: Output token limits table (defaults to the built-in one)
        transport: Optional httpx transport for the upstream client

    Returns:
        RelayStream on success, RelayError otherwise
    """
    settings = conversation.chat_settings
    ctx = RelayContext(request_id=request_id, provider=adapter.name, model=settings.model)
    upstream: Optional[UpstreamStream] = None

    try:
        adapter.validate_model(settings.model)

        profile = get_profile()
        ctx.user_id = profile.user_id
        api_key = profile.get_secret(adapter.credential_field)
        check_api_key(api_key, adapter.display_name)
        ctx.state = RelayState.CREDENTIAL_RESOLVED

        max_tokens = (
            get_max_output_tokens(settings.model, limits) if adapter.uses_output_limits else None
        )
        payload = adapter.prepare_request(
            messages=conversation.message_dicts(),
            model=settings.model,
            max_tokens=max_tokens,
            temperature=settings.temperature,
        )

        upstream = UpstreamStream(
            adapter.url,
            adapter.build_headers(api_key, profile),
            payload,
            timeout_s=adapter.timeout_s,
            transport=transport,
        )
        ctx.state = RelayState.REQUEST_SENT
        await upstream.open()
        ctx.upstream_status = upstream.status_code
    except Exception as e:
        if not isinstance(e, RelayException):
            logger.error(f"Relay {request_id} setup failed: {type(e).__name__}: {e}", exc_info=True)
        error = map_relay_error(e, adapter.display_name)
        ctx.state = RelayState.REJECTED
        ctx.upstream_status = error.upstream_status
        _log_and_metric_relay(ctx, "error", error.code.value, level="WARNING")
        return error

    return RelayStream(
        request_id=request_id,
        provider=adapter.name,
        model=settings.model,
        events=_relay_events(upstream, ctx),
        context=ctx,
        upstream=upstream,
    )
