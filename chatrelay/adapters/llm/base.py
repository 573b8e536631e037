"""Provider adapter record shared by every relay endpoint."""
import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from chatrelay.core.errors import InvalidModelError
from chatrelay.core.profile import Profile

Messages = List[Dict[str, Any]]
MessageTranslator = Callable[[Messages], Dict[str, Any]]
HeaderBuilder = Callable[[str, Profile], Dict[str, str]]


def passthrough_messages(messages: Messages) -> Dict[str, Any]:
    """Vendor-neutral shape: messages go upstream unchanged."""
    return {"messages": messages}


def bearer_headers(api_key: str, profile: Profile) -> Dict[str, str]:
    """Authorization header used by OpenAI-compatible APIs."""
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


@dataclass(frozen=True)
class ProviderAdapter:
    """Everything the relay needs to know about one provider.

    Providers differ only in data: where to send the request, which
    profile field holds the key, how messages and headers are shaped.
    """

    name: str
    display_name: str
    credential_field: str
    base_url: str
    api_path: str = "/chat/completions"
    timeout_s: float = 60.0
    supports_temperature: bool = False
    uses_output_limits: bool = True
    default_max_tokens: Optional[int] = None
    supported_models: Optional[Tuple[str, ...]] = None
    translate_messages: MessageTranslator = passthrough_messages
    build_headers: HeaderBuilder = bearer_headers

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.api_path}"

    def validate_model(self, model: str) -> None:
        """Reject models outside supported_models, when the set is configured.

        Raises:
            InvalidModelError: If the model is not supported
        """
        if self.supported_models is not None and model not in self.supported_models:
            raise InvalidModelError(model, self.supported_models)

    def prepare_request(
        self,
        messages: Messages,
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Prepare provider-specific request payload. Always streaming."""
        payload: Dict[str, Any] = {"model": model}
        payload.update(self.translate_messages(messages))

        if max_tokens is None:
            max_tokens = self.default_max_tokens
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if self.supports_temperature and temperature is not None:
            payload["temperature"] = temperature
        payload["stream"] = True

        return payload

    def with_overrides(self, **changes: Any) -> "ProviderAdapter":
        """Copy of this adapter with config-supplied fields replaced."""
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})
