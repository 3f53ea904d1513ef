from __future__ import annotations


class ProviderError(RuntimeError):
    """Base exception for provider-related failures."""

    status_code: int = 500


class ProviderRequestError(ProviderError):
    """HTTP/network/transport layer failures (non-2xx, unexpected status, etc.)."""

    status_code = 502


class ProviderRateLimited(ProviderRequestError):
    """Provider throttled the request (HTTP 429). Callers may retry later."""

    status_code = 429


class ProviderAuthError(ProviderRequestError):
    """Provider rejected our credentials (HTTP 401/403). Not retryable."""

    status_code = 503


class ProviderUnreachable(ProviderRequestError):
    """Timeout, connection failure or upstream 5xx. Transient."""

    status_code = 504


class ProviderResponseError(ProviderError):
    """Provider returned a well-formed response indicating an application-level error."""

    status_code = 502


class ProviderCapabilityError(ProviderError):
    """No adapter is registered for the requested sport or operation."""

    status_code = 404


class ProviderMappingError(ProviderError):
    """Mapping/extraction failed due to unexpected schema or values."""

    status_code = 502

    def __init__(self, message: str, context: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"
