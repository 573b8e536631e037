"""Shared dependencies and utilities for the chatrelay FastAPI application.

This module contains:
- Global state management (config, adapters, limits, profile store)
- Caller identification helpers
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import httpx
from fastapi import Request

from chatrelay.adapters.llm.base import ProviderAdapter
from chatrelay.adapters.llm.factory import ADAPTERS
from chatrelay.config.loader import ConfigLoader
from chatrelay.core.limits import CHAT_SETTING_LIMITS
from chatrelay.core.profile import Profile, ProfileStore

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


@dataclass
class AppState:
    """Application state container for all shared, read-only components.

    Nothing here is mutated per request; relays only read from it.
    """
    config_loader: Optional[ConfigLoader] = None
    adapters: Dict[str, ProviderAdapter] = field(default_factory=lambda: dict(ADAPTERS))
    model_limits: Dict[str, Dict[str, int]] = field(default_factory=lambda: dict(CHAT_SETTING_LIMITS))
    profile_store: ProfileStore = field(default_factory=ProfileStore)
    upstream_transport: Optional[httpx.AsyncBaseTransport] = None


# Global application state instance
app_state = AppState()


def get_app_state() -> AppState:
    """Get the global application state.

    Returns:
        AppState: The global application state instance.
    """
    return app_state


def get_caller_api_key(request: Request) -> Optional[str]:
    """Caller access key from the X-API-Key header, if present."""
    return request.headers.get(API_KEY_HEADER)


def profile_resolver(request: Request) -> Callable[[], Profile]:
    """Build the profile lookup the relay calls once it needs a credential."""
    state = get_app_state()
    api_key = get_caller_api_key(request)

    def get_server_profile() -> Profile:
        return state.profile_store.get_server_profile(api_key)

    return get_server_profile
