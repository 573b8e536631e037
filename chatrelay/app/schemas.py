"""Request/Response schemas for chatrelay.

This module provides Pydantic models for:
- The conversation payload posted by the browser
- The JSON error envelope returned before a stream is opened
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ChatSettings(BaseModel):
    """Per-session settings chosen in the client."""

    model_config = ConfigDict(extra="allow")

    model: str = Field(..., description="Model identifier (e.g., 'gpt-4', 'claude-3-haiku-20240307')")
    temperature: Optional[float] = Field(
        None, description="Sampling temperature; only sent to providers that accept it"
    )


class ChatMessage(BaseModel):
    """Chat message structure.

    Content is either plain text or a list of content parts. A part is a
    plain string or a dict such as {"type": "text", "text": ...} and
    {"type": "image_url", "image_url": {"url": "data:image/png;base64,..."}}.
    Unknown keys are preserved and forwarded upstream.
    """

    model_config = ConfigDict(extra="allow")

    role: str = Field(..., description="Message role: system, user, or assistant")
    content: Union[str, List[Union[str, Dict[str, Any]]]] = Field(..., description="Message content")


class ConversationRequest(BaseModel):
    """Request schema for POST /api/chat/{provider}."""

    model_config = ConfigDict(populate_by_name=True)

    chat_settings: ChatSettings = Field(..., alias="chatSettings")
    messages: List[ChatMessage] = Field(
        ...,
        min_length=1,
        description=(
            "Ordered conversation. The first message is the system prompt "
            "for providers that take it separately (Anthropic)."
        ),
    )

    def message_dicts(self) -> List[Dict[str, Any]]:
        """Messages as plain dicts, extra keys included."""
        return [message.model_dump() for message in self.messages]


class ErrorResponse(BaseModel):
    """Error envelope returned instead of a stream."""

    message: str = Field(..., description="Human-readable error message")
