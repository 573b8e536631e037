"""Per-model output token limits.

Keyed by model identifier. A model missing from the table gets no
explicit ``max_tokens`` in the upstream request.
"""
from typing import Dict, Mapping, Optional

MAX_TOKEN_OUTPUT_LENGTH = "MAX_TOKEN_OUTPUT_LENGTH"

CHAT_SETTING_LIMITS: Dict[str, Dict[str, int]] = {
    # Anthropic
    "claude-2.1": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "claude-instant-1.2": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "claude-3-haiku-20240307": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "claude-3-sonnet-20240229": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "claude-3-opus-20240229": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "claude-3-5-sonnet-20240620": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    # Groq
    "llama3-8b-8192": {MAX_TOKEN_OUTPUT_LENGTH: 8192},
    "llama3-70b-8192": {MAX_TOKEN_OUTPUT_LENGTH: 8192},
    "mixtral-8x7b-32768": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "gemma-7b-it": {MAX_TOKEN_OUTPUT_LENGTH: 8192},
    # Mistral
    "mistral-tiny": {MAX_TOKEN_OUTPUT_LENGTH: 2000},
    "mistral-small-latest": {MAX_TOKEN_OUTPUT_LENGTH: 2000},
    "mistral-medium-latest": {MAX_TOKEN_OUTPUT_LENGTH: 2000},
    "mistral-large-latest": {MAX_TOKEN_OUTPUT_LENGTH: 2000},
    # OpenAI
    "gpt-3.5-turbo": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "gpt-4": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "gpt-4-turbo": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "gpt-4-turbo-preview": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "gpt-4-vision-preview": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
    "gpt-4o": {MAX_TOKEN_OUTPUT_LENGTH: 4096},
}


def get_max_output_tokens(
    model: str,
    limits: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> Optional[int]:
    """Look up the output token bound for a model.

    Args:
        model: Model identifier from the chat settings
        limits: Table to consult (defaults to CHAT_SETTING_LIMITS)

    Returns:
        The bound, or None when the model has no entry
    """
    table = CHAT_SETTING_LIMITS if limits is None else limits
    entry = table.get(model)
    if not entry:
        return None
    return entry.get(MAX_TOKEN_OUTPUT_LENGTH)
