"""Registry of provider adapters."""
from typing import Any, Dict, Optional

from chatrelay.adapters.llm.anthropic import ANTHROPIC
from chatrelay.adapters.llm.base import ProviderAdapter
from chatrelay.adapters.llm.groq import GROQ
from chatrelay.adapters.llm.mistral import MISTRAL
from chatrelay.adapters.llm.openai import OPENAI
from chatrelay.adapters.llm.perplexity import PERPLEXITY

ADAPTERS: Dict[str, ProviderAdapter] = {
    adapter.name: adapter
    for adapter in (ANTHROPIC, GROQ, MISTRAL, OPENAI, PERPLEXITY)
}


def get_adapter(
    provider: str,
    adapters: Optional[Dict[str, ProviderAdapter]] = None,
) -> Optional[ProviderAdapter]:
    """Get adapter for provider, or None if the provider is unknown."""
    return (adapters if adapters is not None else ADAPTERS).get(provider.lower())


def build_adapters(providers_config: Optional[Dict[str, Dict[str, Any]]] = None) -> Dict[str, ProviderAdapter]:
    """Apply per-provider config overrides to the built-in adapters.

    Args:
        providers_config: ``providers`` section of the config, keyed by name

    Returns:
        Mapping of provider name to configured adapter
    """
    providers_config = providers_config or {}
    adapters = {}
    for name, adapter in ADAPTERS.items():
        overrides = providers_config.get(name) or {}
        supported_models = overrides.get("supported_models")
        timeout_ms = overrides.get("timeout_ms")
        adapters[name] = adapter.with_overrides(
            base_url=overrides.get("base_url"),
            timeout_s=timeout_ms / 1000.0 if timeout_ms else None,
            default_max_tokens=overrides.get("default_max_tokens"),
            supported_models=tuple(supported_models) if supported_models is not None else None,
        )
    return adapters
