"""Perplexity adapter."""
from chatrelay.adapters.llm.base import ProviderAdapter

PERPLEXITY = ProviderAdapter(
    name="perplexity",
    display_name="Perplexity",
    credential_field="perplexity_api_key",
    base_url="https://api.perplexity.ai",
    # Perplexity picks its own output bound
    uses_output_limits=False,
)
