"""Mistral AI adapter. The API is OpenAI-compatible."""
from chatrelay.adapters.llm.base import ProviderAdapter

MISTRAL = ProviderAdapter(
    name="mistral",
    display_name="Mistral",
    credential_field="mistral_api_key",
    base_url="https://api.mistral.ai/v1",
)
