"""Tests for provider credential checks."""
import pytest

from chatrelay.core.credentials import check_api_key
from chatrelay.core.errors import MissingCredentialError


def test_check_api_key_accepts_secret():
    check_api_key("sk-test", "OpenAI")


@pytest.mark.parametrize("secret", [None, "", "   "])
def test_check_api_key_rejects_absent_secret(secret):
    with pytest.raises(MissingCredentialError) as exc_info:
        check_api_key(secret, "Groq")

    assert "api key not found" in exc_info.value.message.lower()
    assert exc_info.value.status_code is None
