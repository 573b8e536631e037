"""Caller profiles holding per-provider credentials."""
import hashlib
import json
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import redis

from chatrelay.core.errors import ProfileNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class Profile:
    """Stored settings of one caller."""

    user_id: str
    anthropic_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    mistral_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_organization_id: Optional[str] = None
    perplexity_api_key: Optional[str] = None

    @classmethod
    def from_dict(cls, user_id: str, data: Dict[str, Any]) -> "Profile":
        """Build a profile, ignoring keys that are not profile fields."""
        known = {f.name for f in fields(cls)} - {"user_id"}
        return cls(user_id=user_id, **{k: v for k, v in data.items() if k in known})

    def get_secret(self, field_name: str) -> Optional[str]:
        """Return the credential stored under field_name, if any."""
        return getattr(self, field_name, None)


class ProfileStore:
    """Resolves callers to profiles.

    Lookup order: Redis (when connected), then profiles from config.
    Both are keyed by the caller's access key (the X-API-Key header).
    """

    def __init__(
        self,
        profiles: Optional[Dict[str, Profile]] = None,
        redis_url: Optional[str] = None,
        key_prefix: str = "chatrelay",
    ):
        """
        Args:
            profiles: Mapping of caller access key to Profile
            redis_url: Redis connection URL (optional)
            key_prefix: Prefix for Redis keys
        """
        self.profiles: Dict[str, Profile] = profiles or {}
        self.key_prefix = key_prefix
        self.client = None
        self.enabled = False
        if redis_url:
            try:
                self.client = redis.from_url(redis_url, decode_responses=True)
                self.client.ping()
                self.enabled = True
                logger.info(f"Profile store connected to Redis: {redis_url}")
            except Exception as e:
                self.client = None
                logger.warning(f"Profile store Redis connection failed (config profiles only): {e}")

    def _make_key(self, api_key: str) -> str:
        digest = hashlib.sha256(api_key.encode()).hexdigest()
        return f"{self.key_prefix}:profile:{digest}"

    def _get_from_redis(self, api_key: str) -> Optional[Profile]:
        if not self.enabled or not self.client:
            return None

        key = self._make_key(api_key)
        try:
            raw = self.client.get(key)
        except Exception as e:
            logger.warning(f"Profile store get error (graceful degradation): {e}", exc_info=True)
            return None
        if not raw:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Profile store: corrupted value for key {key[:50]}...: {e}")
            return None
        return Profile.from_dict(data.pop("user_id", key), data)

    def get_server_profile(self, api_key: Optional[str]) -> Profile:
        """Resolve the caller's profile.

        Raises:
            ProfileNotFoundError: If api_key is missing or unknown
        """
        if not api_key:
            raise ProfileNotFoundError("Missing X-API-Key header")

        profile = self._get_from_redis(api_key)
        if profile is not None:
            return profile

        profile = self.profiles.get(api_key)
        if profile is not None:
            return profile

        raise ProfileNotFoundError("Invalid API key")
