"""Pydantic schemas for chatrelay configuration validation."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

KNOWN_PROVIDERS = ("anthropic", "groq", "mistral", "openai", "perplexity")


class ProviderConfig(BaseModel):
    """Per-provider overrides of the built-in adapter."""

    base_url: Optional[str] = Field(default=None, description="Provider API base URL")
    timeout_ms: Optional[int] = Field(
        default=None, gt=0, le=600000, description="Read timeout between chunks in milliseconds"
    )
    default_max_tokens: Optional[int] = Field(
        default=None, gt=0, description="max_tokens sent when the limits table has no entry"
    )
    supported_models: Optional[List[str]] = Field(
        default=None, description="If set, models outside this list are rejected with 400"
    )


class ProfileConfig(BaseModel):
    """Caller profile with per-provider credentials.

    Secret values may be 'env:VAR_NAME' to read from the environment.
    """

    api_key: str = Field(..., description="Caller access key (sent as X-API-Key)")
    anthropic_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    mistral_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_organization_id: Optional[str] = None
    perplexity_api_key: Optional[str] = None


class RelayConfig(BaseModel):
    """Root configuration model."""

    providers: Dict[str, ProviderConfig] = Field(
        default_factory=dict, description="Provider overrides keyed by provider name"
    )
    profiles: Dict[str, ProfileConfig] = Field(
        default_factory=dict, description="Caller profiles keyed by profile name"
    )
    model_limits: Dict[str, int] = Field(
        default_factory=dict,
        description="Max output tokens per model, merged over the built-in table",
    )

    @field_validator("providers")
    @classmethod
    def validate_provider_names(cls, v: Dict[str, ProviderConfig]) -> Dict[str, ProviderConfig]:
        """Only the built-in providers can be configured."""
        unknown = sorted(set(v) - set(KNOWN_PROVIDERS))
        if unknown:
            raise ValueError(f"Unknown provider(s) {unknown}. Must be one of {list(KNOWN_PROVIDERS)}")
        return v

    @field_validator("model_limits")
    @classmethod
    def validate_model_limits(cls, v: Dict[str, int]) -> Dict[str, int]:
        for model, limit in v.items():
            if limit <= 0:
                raise ValueError(f"model_limits[{model}] must be > 0, got {limit}")
        return v
