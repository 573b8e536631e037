"""Tests for YAML configuration loading."""
import pytest

from chatrelay.config.loader import ConfigLoader, resolve_secret
from chatrelay.core.limits import CHAT_SETTING_LIMITS, MAX_TOKEN_OUTPUT_LENGTH

CONFIG = """
providers:
  openai:
    supported_models: [gpt-4, gpt-4o]
    timeout_ms: 30000
  groq:
    base_url: http://localhost:9000/v1

model_limits:
  gpt-4o: 16384
  my-local-model: 1024

profiles:
  local:
    api_key: env:TEST_CALLER_KEY
    openai_api_key: env:TEST_OPENAI_KEY
    groq_api_key: gsk-inline
  broken:
    api_key: env:TEST_UNSET_VARIABLE
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG)
    return path


def test_resolve_secret(monkeypatch):
    monkeypatch.setenv("TEST_SECRET", "s3cret")

    assert resolve_secret("env:TEST_SECRET") == "s3cret"
    assert resolve_secret("plain") == "plain"
    assert resolve_secret(None) is None


def test_load_providers(config_file):
    loader = ConfigLoader(str(config_file))
    loader.load()

    providers = loader.get_providers()
    assert providers["openai"] == {"supported_models": ["gpt-4", "gpt-4o"], "timeout_ms": 30000}
    assert providers["groq"] == {"base_url": "http://localhost:9000/v1"}


def test_profiles_keyed_by_resolved_access_key(config_file, monkeypatch):
    monkeypatch.setenv("TEST_CALLER_KEY", "caller-123")
    monkeypatch.setenv("TEST_OPENAI_KEY", "sk-from-env")
    monkeypatch.delenv("TEST_UNSET_VARIABLE", raising=False)

    loader = ConfigLoader(str(config_file))
    loader.load()
    profiles = loader.get_profiles()

    # Profiles without a usable access key are skipped
    assert list(profiles) == ["caller-123"]
    profile = profiles["caller-123"]
    assert profile.user_id == "local"
    assert profile.openai_api_key == "sk-from-env"
    assert profile.groq_api_key == "gsk-inline"
    assert profile.anthropic_api_key is None


def test_model_limits_merged_over_builtin_table(config_file):
    loader = ConfigLoader(str(config_file))
    loader.load()
    limits = loader.get_model_limits()

    assert limits["gpt-4o"] == {MAX_TOKEN_OUTPUT_LENGTH: 16384}
    assert limits["my-local-model"] == {MAX_TOKEN_OUTPUT_LENGTH: 1024}
    assert limits["gpt-4"] == CHAT_SETTING_LIMITS["gpt-4"]
    # Built-in table untouched
    assert CHAT_SETTING_LIMITS["gpt-4o"] == {MAX_TOKEN_OUTPUT_LENGTH: 4096}


def test_missing_file_uses_defaults(tmp_path):
    loader = ConfigLoader(str(tmp_path / "absent.yaml"))

    assert loader.load() == {"providers": {}, "profiles": {}, "model_limits": {}}
    assert loader.get_profiles() == {}
    assert loader.get_model_limits() == CHAT_SETTING_LIMITS


def test_missing_required_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(str(tmp_path / "absent.yaml"), required=True).load()


@pytest.mark.parametrize(
    "content",
    [
        "providers:\n  cohere:\n    base_url: https://api.cohere.ai\n",
        "model_limits:\n  gpt-4: 0\n",
        "profiles:\n  nokey:\n    openai_api_key: sk\n",
        "providers: [unclosed\n",
    ],
)
def test_invalid_config_raises_value_error(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ValueError):
        ConfigLoader(str(path)).load()
