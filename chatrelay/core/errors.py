"""Error codes, relay exceptions and status normalization for chatrelay."""
from enum import Enum
from typing import Iterable, Optional


class ErrorCode(str, Enum):
    """Normalized error codes for chatrelay.

    Used in logs and metrics. The client only ever sees the message.
    """
    # Client errors (4xx)
    UNAUTHORIZED = "UNAUTHORIZED"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    INVALID_MODEL = "INVALID_MODEL"

    # Credential errors
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"

    # Upstream errors (from provider APIs)
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    STREAM_FAILURE = "STREAM_FAILURE"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class RelayException(Exception):
    """Base class for failures raised while setting up a relay."""

    status_code: Optional[int] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidModelError(RelayException):
    """Model identifier outside the provider's supported set."""

    status_code = 400

    def __init__(self, model: str, supported_models: Iterable[str]):
        self.model = model
        self.supported_models = list(supported_models)
        super().__init__(
            f"Invalid model specified: {model}. "
            f"Supported models are: {', '.join(self.supported_models)}."
        )


class MissingCredentialError(RelayException):
    """Provider secret is absent or empty on the caller's profile."""


class ProfileNotFoundError(RelayException):
    """Caller could not be resolved to a stored profile."""

    status_code = 401


class ProviderAPIError(RelayException):
    """Provider rejected the request or could not be reached.

    Mirrors what vendor SDKs raise: a human-readable message plus the
    HTTP status the provider answered with.
    """


class StreamFailure(RelayException):
    """Upstream stream broke after the client response was committed."""

    status_code = 502


class UpstreamStatus(str, Enum):
    """Normalized upstream status codes for metrics.

    Upstream status codes are normalized to reduce Prometheus cardinality.
    Actual status codes are preserved in logs.
    """
    OK = "200"

    BAD_REQUEST = "400"
    UNAUTHORIZED = "401"
    FORBIDDEN = "403"
    NOT_FOUND = "404"
    TOO_MANY_REQUESTS = "429"
    CLIENT_ERROR_OTHER = "4xx"

    INTERNAL_SERVER_ERROR = "500"
    BAD_GATEWAY = "502"
    SERVICE_UNAVAILABLE = "503"
    GATEWAY_TIMEOUT = "504"
    SERVER_ERROR_OTHER = "5xx"

    UNKNOWN = "unknown"

    @classmethod
    def normalize(cls, status_code: Optional[int]) -> str:
        """Normalize HTTP status code to enum value.

        Args:
            status_code: HTTP status code or None

        Returns:
            Normalized status string for metrics
        """
        if status_code is None:
            return cls.UNKNOWN.value

        exact = {
            200: cls.OK,
            400: cls.BAD_REQUEST,
            401: cls.UNAUTHORIZED,
            403: cls.FORBIDDEN,
            404: cls.NOT_FOUND,
            429: cls.TOO_MANY_REQUESTS,
            500: cls.INTERNAL_SERVER_ERROR,
            502: cls.BAD_GATEWAY,
            503: cls.SERVICE_UNAVAILABLE,
            504: cls.GATEWAY_TIMEOUT,
        }
        if status_code in exact:
            return exact[status_code].value
        if 400 <= status_code < 500:
            return cls.CLIENT_ERROR_OTHER.value
        if 500 <= status_code < 600:
            return cls.SERVER_ERROR_OTHER.value
        return cls.UNKNOWN.value
