from __future__ import annotations

from typing import Literal

import httpx

from app.core.logging import get_logger
from app.domain.address import Provider, ValidationOutcome
from app.domain.smarty import classify_smarty_candidates
from app.services.providers import (
    ProviderNotConfiguredError,
    ProviderTransportError,
    api_error,
    decode_json,
    describe_transport_error,
    is_placeholder_credential,
)


SMARTY_STREET_URL = "https://us-street.api.smartystreets.com/street-address"

MatchStrategy = Literal["strict", "invalid", "enhanced"]

_logger = get_logger(__name__)


class SmartyAddressValidator:
    """Validate addresses against the Smarty US Street Address API."""

    name: Provider = "smarty"

    def __init__(
        self,
        auth_id: str | None,
        auth_token: str | None,
        client: httpx.AsyncClient,
        *,
        api_url: str = SMARTY_STREET_URL,
        match_strategy: MatchStrategy = "invalid",
    ) -> None:
        self._auth_id = auth_id
        self._auth_token = auth_token
        self._client = client
        self._api_url = api_url
        self._match_strategy = match_strategy

    @property
    def is_configured(self) -> bool:
        return not (
            is_placeholder_credential(self._auth_id)
            or is_placeholder_credential(self._auth_token)
        )

    async def validate(self, address: str) -> ValidationOutcome:
        if not self.is_configured:
            raise ProviderNotConfiguredError(
                self.name,
                "Smarty API credentials not configured properly. Please set "
                "ADDRCHECK_SMARTY_AUTH_ID and ADDRCHECK_SMARTY_AUTH_TOKEN "
                "environment variables.",
            )

        _logger.info(
            "Smarty validation request", address=address, match=self._match_strategy
        )
        try:
            response = await self._client.get(
                self._api_url,
                params={
                    "auth-id": self._auth_id,
                    "auth-token": self._auth_token,
                    "street": address,
                    "match": self._match_strategy,
                },
            )
        except httpx.HTTPError as exc:
            message = describe_transport_error(exc)
            _logger.error("Smarty request failed", error=message)
            raise ProviderTransportError(self.name, message) from exc

        if not response.is_success:
            error = api_error(self.name, "Smarty", response)
            _logger.error(
                "Smarty API error", status_code=error.status_code, error=str(error)
            )
            raise error

        candidates = decode_json(self.name, "Smarty", response)
        outcome = classify_smarty_candidates(candidates, address)
        _logger.info(
            "Smarty validation completed",
            status=outcome.status,
            candidates=len(candidates) if isinstance(candidates, list) else 0,
        )
        return outcome
