from __future__ import annotations

from enum import Enum
from typing import Mapping

import httpx

from app.core.config import Settings
from app.core.logging import get_logger
from app.domain.address import Provider, ValidationOutcome
from app.services.google import GoogleAddressValidator
from app.services.providers import (
    AddressValidator,
    AllProvidersFailedError,
    ProviderError,
)
from app.services.smarty import SmartyAddressValidator


_logger = get_logger(__name__)


class FallbackAction(Enum):
    ACCEPT = "accept"
    SECOND_OPINION = "second_opinion"
    FAIL_OVER = "fail_over"


PRIMARY_FAILED = "FAILED"

# Keyed on the primary provider's status, or PRIMARY_FAILED when it raised.
FALLBACK_POLICY: dict[str, FallbackAction] = {
    "VALID": FallbackAction.ACCEPT,
    "CORRECTED": FallbackAction.ACCEPT,
    "UNVERIFIABLE": FallbackAction.SECOND_OPINION,
    PRIMARY_FAILED: FallbackAction.FAIL_OVER,
}


class AddressValidationService:
    """Pick the provider(s) for a request and reconcile their outcomes.

    With an explicit provider only that provider runs. Otherwise the primary
    runs first and ``FALLBACK_POLICY`` decides whether the secondary is
    consulted: when the primary fails outright, or when it could not verify
    the address. The secondary is only ever called after the primary has
    answered.
    """

    def __init__(
        self,
        validators: Mapping[Provider, AddressValidator],
        *,
        primary: Provider = "google",
        secondary: Provider = "smarty",
    ) -> None:
        missing = {primary, secondary} - set(validators)
        if missing:
            raise ValueError(f"No validator registered for {sorted(missing)}")
        self._validators = dict(validators)
        self._primary = primary
        self._secondary = secondary

    async def validate(
        self, address: str, provider: Provider | None = None
    ) -> ValidationOutcome:
        if provider is not None:
            _logger.info("Validating with explicit provider", provider=provider)
            return await self._run(provider, address)
        return await self._validate_with_fallback(address)

    async def _validate_with_fallback(self, address: str) -> ValidationOutcome:
        primary_result: ValidationOutcome | ProviderError
        try:
            primary_result = await self._run(self._primary, address)
        except ProviderError as exc:
            primary_result = exc

        if isinstance(primary_result, ProviderError):
            state = PRIMARY_FAILED
        else:
            state = primary_result.status
        action = FALLBACK_POLICY[state]
        _logger.info(
            "Fallback decision",
            primary=self._primary,
            primary_state=state,
            action=action.value,
        )

        if action is FallbackAction.ACCEPT and isinstance(
            primary_result, ValidationOutcome
        ):
            return primary_result

        try:
            return await self._run(self._secondary, address)
        except ProviderError as exc:
            if isinstance(primary_result, ProviderError):
                raise AllProvidersFailedError(
                    {self._primary: primary_result, self._secondary: exc}
                ) from exc
            _logger.warning(
                "Secondary provider failed, keeping primary outcome",
                secondary=self._secondary,
                error=str(exc),
            )
            return primary_result

    async def _run(self, provider: Provider, address: str) -> ValidationOutcome:
        validator = self._validators.get(provider)
        if validator is None:
            raise ValueError(f"Unknown address validation provider '{provider}'")
        try:
            return await validator.validate(address)
        except ProviderError as exc:
            _logger.warning(
                "Provider validation failed",
                provider=provider,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise


def build_address_validation_service(
    settings: Settings, client: httpx.AsyncClient
) -> AddressValidationService:
    """Wire both provider adapters from settings around a shared HTTP client."""

    google = GoogleAddressValidator(
        settings.google_api_key, client, api_url=settings.google_api_url
    )
    smarty = SmartyAddressValidator(
        settings.smarty_auth_id,
        settings.smarty_auth_token,
        client,
        api_url=settings.smarty_api_url,
        match_strategy=settings.smarty_match_strategy,
    )

    if settings.environment == "production":
        for validator in (google, smarty):
            if not validator.is_configured:
                _logger.warning(
                    "Address provider not configured", provider=validator.name
                )

    return AddressValidationService({google.name: google, smarty.name: smarty})
