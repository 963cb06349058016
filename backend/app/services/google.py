from __future__ import annotations

import httpx

from app.core.logging import get_logger
from app.domain.address import Provider, ValidationOutcome
from app.domain.google import classify_google_response
from app.services.providers import (
    ProviderNotConfiguredError,
    ProviderTransportError,
    api_error,
    decode_json,
    describe_transport_error,
    is_placeholder_credential,
)


GOOGLE_VALIDATION_URL = "https://addressvalidation.googleapis.com/v1:validateAddress"

_logger = get_logger(__name__)


class GoogleAddressValidator:
    """Validate addresses against the Google Address Validation API."""

    name: Provider = "google"

    def __init__(
        self,
        api_key: str | None,
        client: httpx.AsyncClient,
        *,
        api_url: str = GOOGLE_VALIDATION_URL,
    ) -> None:
        self._api_key = api_key
        self._client = client
        self._api_url = api_url

    @property
    def is_configured(self) -> bool:
        return not is_placeholder_credential(self._api_key)

    async def validate(self, address: str) -> ValidationOutcome:
        if not self.is_configured:
            raise ProviderNotConfiguredError(
                self.name,
                "Google API key not configured properly. "
                "Please set ADDRCHECK_GOOGLE_API_KEY environment variable.",
            )

        _logger.info("Google validation request", address=address)
        try:
            response = await self._client.post(
                self._api_url,
                params={"key": self._api_key},
                json={"address": {"regionCode": "US", "addressLines": [address]}},
            )
        except httpx.HTTPError as exc:
            message = describe_transport_error(exc)
            _logger.error("Google request failed", error=message)
            raise ProviderTransportError(self.name, message) from exc

        if not response.is_success:
            error = api_error(self.name, "Google", response)
            _logger.error(
                "Google API error", status_code=error.status_code, error=str(error)
            )
            raise error

        payload = decode_json(self.name, "Google", response)
        outcome = classify_google_response(payload)
        _logger.info(
            "Google validation completed",
            status=outcome.status,
            corrections=len(outcome.corrections),
            warnings=len(outcome.warnings),
        )
        return outcome
