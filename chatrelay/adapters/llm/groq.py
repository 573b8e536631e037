"""Groq adapter. Served through Groq's OpenAI-compatible endpoint."""
from chatrelay.adapters.llm.base import ProviderAdapter

GROQ = ProviderAdapter(
    name="groq",
    display_name="Groq",
    credential_field="groq_api_key",
    base_url="https://api.groq.com/openai/v1",
)
