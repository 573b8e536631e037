"""Tests for caller profiles."""
import json
from unittest.mock import patch

import pytest

from chatrelay.core.errors import ProfileNotFoundError
from chatrelay.core.profile import Profile, ProfileStore


def test_profile_from_dict_ignores_unknown_keys():
    profile = Profile.from_dict("alice", {"openai_api_key": "sk-1", "theme": "dark"})

    assert profile.user_id == "alice"
    assert profile.openai_api_key == "sk-1"
    assert profile.get_secret("openai_api_key") == "sk-1"
    assert profile.get_secret("groq_api_key") is None


def test_configured_profile_lookup(profile):
    store = ProfileStore({"key-1": profile})

    assert store.get_server_profile("key-1") is profile
    assert not store.enabled


@pytest.mark.parametrize("api_key,message", [(None, "Missing X-API-Key header"), ("", "Missing X-API-Key header"), ("bad", "Invalid API key")])
def test_unresolvable_caller(profile, api_key, message):
    store = ProfileStore({"key-1": profile})

    with pytest.raises(ProfileNotFoundError) as exc_info:
        store.get_server_profile(api_key)

    assert exc_info.value.message == message
    assert exc_info.value.status_code == 401


def test_redis_profile_takes_precedence(mock_redis, profile):
    mock_redis.get.return_value = json.dumps({"user_id": "from-redis", "groq_api_key": "gsk-redis"})

    with patch("chatrelay.core.profile.redis.from_url", return_value=mock_redis):
        store = ProfileStore({"key-1": profile}, redis_url="redis://localhost:6379/0")

    resolved = store.get_server_profile("key-1")

    assert store.enabled
    assert resolved.user_id == "from-redis"
    assert resolved.groq_api_key == "gsk-redis"
    requested_key = mock_redis.get.call_args[0][0]
    assert requested_key.startswith("chatrelay:profile:")
    assert "key-1" not in requested_key


def test_redis_miss_falls_back_to_config(mock_redis, profile):
    with patch("chatrelay.core.profile.redis.from_url", return_value=mock_redis):
        store = ProfileStore({"key-1": profile}, redis_url="redis://localhost:6379/0")

    assert store.get_server_profile("key-1") is profile


def test_corrupted_redis_value_is_ignored(mock_redis, profile):
    mock_redis.get.return_value = "{not json"

    with patch("chatrelay.core.profile.redis.from_url", return_value=mock_redis):
        store = ProfileStore({"key-1": profile}, redis_url="redis://localhost:6379/0")

    assert store.get_server_profile("key-1") is profile


def test_redis_errors_degrade_gracefully(mock_redis, profile):
    mock_redis.get.side_effect = ConnectionError("redis went away")

    with patch("chatrelay.core.profile.redis.from_url", return_value=mock_redis):
        store = ProfileStore({"key-1": profile}, redis_url="redis://localhost:6379/0")

    assert store.get_server_profile("key-1") is profile


def test_unreachable_redis_disables_store(mock_redis):
    mock_redis.ping.side_effect = ConnectionError("refused")

    with patch("chatrelay.core.profile.redis.from_url", return_value=mock_redis):
        store = ProfileStore(redis_url="redis://localhost:6379/0")

    assert not store.enabled
