"""Anthropic Claude adapter."""
from typing import Any, Dict

from chatrelay.adapters.llm.base import Messages, ProviderAdapter
from chatrelay.core.data_url import get_base64_from_data_url, get_media_type_from_data_url
from chatrelay.core.profile import Profile

ANTHROPIC_VERSION = "2023-06-01"


def _image_url(part: Dict[str, Any]) -> str:
    """Data URL of an image part, in either the OpenAI or the flat shape."""
    if part.get("type") == "image_url":
        image_url = part.get("image_url") or {}
        return image_url.get("url") or ""
    if part.get("type") == "image":
        return part.get("url") or ""
    return ""


def _translate_part(part: Any) -> Any:
    if isinstance(part, str):
        return {"type": "text", "text": part}

    if isinstance(part, dict):
        url = _image_url(part)
        if url:
            return {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": get_media_type_from_data_url(url),
                    "data": get_base64_from_data_url(url),
                },
            }

    return part


def translate_messages(messages: Messages) -> Dict[str, Any]:
    """Shape a conversation for the Messages API.

    The first message becomes the top-level ``system`` field. Every other
    message gets a list of content blocks: strings become text blocks and
    image data URLs become base64 image sources.
    """
    formatted = []
    for message in messages[1:]:
        content = message.get("content")
        if isinstance(content, str):
            content = [content]
        formatted.append({
            **message,
            "content": [_translate_part(part) for part in content or []],
        })

    return {
        "system": messages[0].get("content"),
        "messages": formatted,
    }


def anthropic_headers(api_key: str, profile: Profile) -> Dict[str, str]:
    return {
        "x-api-key": api_key,
        "anthropic-version": ANTHROPIC_VERSION,
        "Content-Type": "application/json",
    }


ANTHROPIC = ProviderAdapter(
    name="anthropic",
    display_name="Anthropic",
    credential_field="anthropic_api_key",
    base_url="https://api.anthropic.com/v1",
    api_path="/messages",
    supports_temperature=True,
    # The Messages API rejects requests without max_tokens
    default_max_tokens=4096,
    translate_messages=translate_messages,
    build_headers=anthropic_headers,
)
