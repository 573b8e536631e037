"""Chat relay endpoints.

This module provides:
- POST /api/chat/{provider} - stream a chat completion from anthropic,
  groq, mistral, openai or perplexity as server-sent events
"""
import logging
import uuid

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from chatrelay.adapters.llm.factory import get_adapter
from chatrelay.app.dependencies import get_app_state, profile_resolver
from chatrelay.app.schemas import ConversationRequest, ErrorResponse
from chatrelay.app.services import RelayError, RelayState, open_relay
from chatrelay.core.errors import ErrorCode
from chatrelay.core.logging import structured_logger
from chatrelay.metrics.prometheus import errors_total

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


@router.post(
    "/api/chat/{provider}",
    summary="Relay a streaming chat completion",
    description=(
        "Forwards the conversation to the provider with stream=true and "
        "relays every upstream chunk as a `data: <json>` event. "
        "Errors before the stream opens are returned as JSON `{message}`."
    ),
    responses={200: {"content": {"text/event-stream": {}}}},
)
async def relay_chat(
    provider: str,
    request: ConversationRequest,
    http_request: Request,
):
    """Relay endpoint shared by every provider."""
    state = get_app_state()
    request_id = f"req_{uuid.uuid4().hex[:16]}"

    adapter = get_adapter(provider, state.adapters)
    if adapter is None:
        # Arbitrary path values stay out of metric labels
        errors_total.labels(
            provider="unknown", error_code=ErrorCode.NOT_FOUND.value, upstream_status="unknown"
        ).inc()
        structured_logger.log_relay(
            request_id=request_id,
            provider=provider,
            model=request.chat_settings.model,
            final_state=RelayState.REJECTED.value,
            outcome="error",
            error_code=ErrorCode.NOT_FOUND.value,
            level="WARNING",
        )
        return JSONResponse(
            content=ErrorResponse(
                message=f"Unknown provider '{provider}'. Supported providers are: "
                f"{', '.join(sorted(state.adapters))}."
            ).model_dump(),
            status_code=404,
            headers={"X-Request-ID": request_id},
        )

    result = await open_relay(
        adapter,
        request,
        get_profile=profile_resolver(http_request),
        request_id=request_id,
        limits=state.model_limits,
        transport=state.upstream_transport,
    )

    if isinstance(result, RelayError):
        return JSONResponse(
            content=ErrorResponse(message=result.message).model_dump(),
            status_code=result.status_code,
            headers={"X-Request-ID": request_id},
        )

    return StreamingResponse(
        result.events,
        media_type="text/event-stream",
        background=BackgroundTask(result.aclose),
        headers={
            "X-Request-ID": request_id,
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
