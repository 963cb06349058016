from __future__ import annotations

from typing import Any, Protocol

import httpx

from app.domain.address import Provider, ValidationOutcome


PLACEHOLDER_PREFIX = "test-"


class ProviderError(RuntimeError):
    """Base class for failures raised by an address-validation provider."""

    def __init__(self, provider: Provider, message: str) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderNotConfiguredError(ProviderError):
    """Raised when a provider's credentials are missing or placeholders."""


class ProviderTransportError(ProviderError):
    """Raised when the provider could not be reached."""


class ProviderAPIError(ProviderError):
    """Raised when the provider answers with a non-success response."""

    def __init__(
        self, provider: Provider, message: str, *, status_code: int, body: str
    ) -> None:
        super().__init__(provider, message)
        self.status_code = status_code
        self.body = body


class AllProvidersFailedError(RuntimeError):
    """Raised when automatic fallback exhausted every provider."""

    def __init__(self, errors: dict[Provider, ProviderError]) -> None:
        details = ", ".join(f"{name}: {error}" for name, error in errors.items())
        super().__init__(f"Both providers failed - {details}")
        self.errors = errors


class AddressValidator(Protocol):
    name: Provider

    async def validate(self, address: str) -> ValidationOutcome: ...


def is_placeholder_credential(value: str | None) -> bool:
    return not value or value.startswith(PLACEHOLDER_PREFIX)


def describe_transport_error(exc: httpx.HTTPError) -> str:
    return str(exc) or exc.__class__.__name__


def api_error(
    provider: Provider, label: str, response: httpx.Response
) -> ProviderAPIError:
    body = response.text
    return ProviderAPIError(
        provider,
        f"{label} API error: {response.status_code} {response.reason_phrase} - {body}",
        status_code=response.status_code,
        body=body,
    )


def decode_json(provider: Provider, label: str, response: httpx.Response) -> Any:
    """Decode a successful provider response, reporting garbage as an API error."""

    try:
        return response.json()
    except ValueError as exc:
        raise api_error(provider, label, response) from exc
