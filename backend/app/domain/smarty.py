from __future__ import annotations

from typing import Any, Mapping

from app.domain.address import StandardizedAddress, ValidationOutcome
from app.domain.classification import StatusAccumulator, mapping_or_empty, text_or_none


_STREET_RECORD_TYPES = {"S", "H"}
_SECONDARY_MISSING_CODES = {"S", "D"}
_DELIVERY_LINE_PREFIX = 20


def classify_smarty_candidates(
    candidates: Any, original_address: str
) -> ValidationOutcome:
    """Classify a Smarty US Street API response (a list of candidates).

    Only the first candidate is considered. An empty response means Smarty
    found nothing to match against.
    """

    if not isinstance(candidates, list) or not candidates:
        return no_match_outcome()
    return classify_smarty_candidate(mapping_or_empty(candidates[0]), original_address)


def no_match_outcome() -> ValidationOutcome:
    return ValidationOutcome(
        standardized=StandardizedAddress(),
        status="UNVERIFIABLE",
        provider="smarty",
        warnings=["No matching address found"],
    )


def classify_smarty_candidate(
    candidate: Mapping[str, Any], original_address: str
) -> ValidationOutcome:
    analysis = mapping_or_empty(candidate.get("analysis"))
    metadata = mapping_or_empty(candidate.get("metadata"))
    components = mapping_or_empty(candidate.get("components"))

    tracker = StatusAccumulator()

    match_code = text_or_none(analysis.get("dpv_match_code"))
    if match_code == "N":
        tracker.warn("Address could not be confirmed by USPS", status="UNVERIFIABLE")
    elif match_code in _SECONDARY_MISSING_CODES:
        tracker.warn(
            "Address is missing secondary information (apt, suite, etc.)",
            status="CORRECTED",
        )

    if analysis.get("enhanced_match"):
        tracker.correct("Address was enhanced or corrected", status="CORRECTED")

    # Prefix heuristic: reformatting past the first 20 characters goes unnoticed.
    delivery_line = (text_or_none(candidate.get("delivery_line_1")) or "").lower()
    prefix = delivery_line[:_DELIVERY_LINE_PREFIX]
    if prefix not in original_address.lower() and tracker.is_valid:
        tracker.correct("Address format was standardized", status="CORRECTED")

    if analysis.get("dpv_vacant") == "Y":
        tracker.warn("Address is marked as vacant")

    record_type = text_or_none(metadata.get("record_type"))
    if record_type and record_type not in _STREET_RECORD_TYPES:
        tracker.warn(f"Address record type is {record_type}")

    return tracker.finish(extract_smarty_address(components), provider="smarty")


def extract_smarty_address(components: Mapping[str, Any]) -> StandardizedAddress:
    street_parts = [
        text_or_none(components.get(key))
        for key in (
            "street_predirection",
            "street_name",
            "street_suffix",
            "street_postdirection",
        )
    ]
    street = " ".join(part for part in street_parts if part) or None

    zipcode = text_or_none(components.get("zipcode"))
    plus4 = text_or_none(components.get("plus4_code"))
    zip_value = f"{zipcode}-{plus4}" if zipcode and plus4 else zipcode

    return StandardizedAddress(
        number=text_or_none(components.get("primary_number")),
        street=street,
        city=text_or_none(components.get("city_name")),
        state=text_or_none(components.get("state_abbreviation")),
        zip=zip_value,
    )
