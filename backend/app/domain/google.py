from __future__ import annotations

from typing import Any, Mapping

from app.domain.address import StandardizedAddress, ValidationOutcome
from app.domain.classification import StatusAccumulator, mapping_or_empty, text_or_none


_SUSPICIOUS = "UNCONFIRMED_AND_SUSPICIOUS"
_CONFIRMED = "CONFIRMED"
_INSUFFICIENT_GRANULARITY = {"OTHER", "GRANULARITY_UNSPECIFIED"}


def classify_google_response(payload: Mapping[str, Any]) -> ValidationOutcome:
    """Translate a Google Address Validation response into a canonical outcome.

    The verdict flags, the postal address region and the per-component
    confirmation levels are checked in a fixed order. Every rule is evaluated,
    so one response can carry several warnings and corrections.
    """

    if not isinstance(payload, Mapping):
        payload = {}
    result = mapping_or_empty(payload.get("result"))
    verdict = mapping_or_empty(result.get("verdict"))
    address = mapping_or_empty(result.get("address"))
    postal_address = mapping_or_empty(address.get("postalAddress"))
    components = _components(address)

    tracker = StatusAccumulator()

    region_code = text_or_none(postal_address.get("regionCode"))
    if region_code and region_code != "US":
        tracker.warn(
            f"Non-US address detected ({region_code}). Only US addresses are supported.",
            status="UNVERIFIABLE",
        )

    if not verdict.get("addressComplete"):
        tracker.warn("Address is incomplete", status="UNVERIFIABLE")

    if verdict.get("hasReplacedComponents"):
        tracker.correct(
            "Address components were corrected or replaced", status="CORRECTED"
        )

    if verdict.get("hasUnconfirmedComponents"):
        unconfirmed = [
            component
            for component in components
            if component.get("confirmationLevel") != _CONFIRMED
        ]
        if any(c.get("confirmationLevel") == _SUSPICIOUS for c in unconfirmed):
            tracker.warn(
                "Address contains suspicious components", status="UNVERIFIABLE"
            )
        elif tracker.is_valid:
            tracker.warn(
                "Address contains unconfirmed but plausible components",
                status="CORRECTED",
            )

    granularity = text_or_none(verdict.get("validationGranularity"))
    if granularity in _INSUFFICIENT_GRANULARITY:
        tracker.warn(
            "Address validation granularity is insufficient", status="UNVERIFIABLE"
        )

    standardized = extract_google_address(components, postal_address)
    return tracker.finish(standardized, provider="google")


def extract_google_address(
    components: list[dict[str, Any]],
    postal_address: Mapping[str, Any],
) -> StandardizedAddress:
    return StandardizedAddress(
        number=_component_text(components, "street_number"),
        street=_component_text(components, "route"),
        city=text_or_none(postal_address.get("locality")),
        state=text_or_none(postal_address.get("administrativeArea")),
        zip=text_or_none(postal_address.get("postalCode")),
    )


def _components(address: Mapping[str, Any]) -> list[dict[str, Any]]:
    raw = address.get("addressComponents")
    if not isinstance(raw, list):
        return []
    return [component for component in raw if isinstance(component, dict)]


def _component_text(components: list[dict[str, Any]], component_type: str) -> str | None:
    for component in components:
        if component.get("componentType") == component_type:
            name = mapping_or_empty(component.get("componentName"))
            return text_or_none(name.get("text"))
    return None
