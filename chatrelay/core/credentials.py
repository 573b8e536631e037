"""Provider credential checks."""
from typing import Optional

from chatrelay.core.errors import MissingCredentialError


def check_api_key(api_key: Optional[str], key_name: str) -> None:
    """Fail when a provider secret is absent or empty.

    The message carries the "API Key not found" phrase the relay keys
    its user-facing wording on.

    Raises:
        MissingCredentialError: If api_key is None or blank
    """
    if api_key is None or not api_key.strip():
        raise MissingCredentialError(f"{key_name} API Key not found")
