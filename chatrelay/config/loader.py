"""YAML configuration loader for chatrelay."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from chatrelay.config.schema import RelayConfig
from chatrelay.core.limits import CHAT_SETTING_LIMITS, MAX_TOKEN_OUTPUT_LENGTH
from chatrelay.core.profile import Profile

logger = logging.getLogger(__name__)


def resolve_secret(value: Optional[str]) -> Optional[str]:
    """Resolve 'env:VAR_NAME' references; other values pass through."""
    if value and value.startswith("env:"):
        return os.getenv(value[4:])
    return value


class ConfigLoader:
    """Load and parse chatrelay configuration."""

    def __init__(self, config_path: str, required: bool = False):
        """
        Args:
            config_path: Path to YAML configuration file
            required: Fail instead of using defaults when the file is missing
        """
        self.config_path = Path(config_path)
        self.required = required
        self.config: Dict[str, Any] = {}

    def load(self) -> Dict[str, Any]:
        """Load and validate configuration from YAML file."""
        if not self.config_path.exists():
            if self.required:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")
            logger.warning(f"Config file not found: {self.config_path}, using built-in defaults")
            raw_config: Dict[str, Any] = {}
        else:
            try:
                with open(self.config_path, "r") as f:
                    raw_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML syntax in {self.config_path}: {e}") from e

        # Validate through Pydantic
        try:
            validated_config = RelayConfig(**raw_config)
            self.config = validated_config.model_dump(exclude_none=True)
        except Exception as e:
            raise ValueError(f"Configuration validation failed in {self.config_path}: {e}") from e

        return self.config

    def get_providers(self) -> Dict[str, Dict[str, Any]]:
        """Get provider overrides."""
        return self.config.get("providers", {})

    def get_profiles(self) -> Dict[str, Profile]:
        """Get profiles keyed by caller access key, with secrets resolved."""
        profiles = {}
        for name, profile_config in self.config.get("profiles", {}).items():
            data = dict(profile_config)
            access_key = resolve_secret(data.pop("api_key"))
            if not access_key:
                logger.warning(f"Profile '{name}' has no usable api_key, skipping")
                continue
            resolved = {k: resolve_secret(v) for k, v in data.items()}
            profiles[access_key] = Profile.from_dict(name, resolved)
        return profiles

    def get_model_limits(self) -> Dict[str, Dict[str, int]]:
        """Get the limits table: built-in entries overridden by config."""
        limits = {model: dict(entry) for model, entry in CHAT_SETTING_LIMITS.items()}
        for model, max_tokens in self.config.get("model_limits", {}).items():
            limits[model] = {MAX_TOKEN_OUTPUT_LENGTH: max_tokens}
        return limits
