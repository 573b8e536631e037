"""OpenAI adapter."""
from typing import Dict

from chatrelay.adapters.llm.base import ProviderAdapter, bearer_headers
from chatrelay.core.profile import Profile

# Default accepted models; overridable via providers.openai.supported_models
OPENAI_SUPPORTED_MODELS = ("gpt-3.5-turbo", "gpt-4", "gpt-4-turbo")


def openai_headers(api_key: str, profile: Profile) -> Dict[str, str]:
    headers = bearer_headers(api_key, profile)
    if profile.openai_organization_id:
        headers["OpenAI-Organization"] = profile.openai_organization_id
    return headers


OPENAI = ProviderAdapter(
    name="openai",
    display_name="OpenAI",
    credential_field="openai_api_key",
    base_url="https://api.openai.com/v1",
    supports_temperature=True,
    supported_models=OPENAI_SUPPORTED_MODELS,
    build_headers=openai_headers,
)
