from __future__ import annotations

import copy

from app.domain.address import StandardizedAddress
from app.domain.google import classify_google_response


def _component(component_type, text, level="CONFIRMED"):
    return {
        "componentName": {"text": text, "languageCode": "en"},
        "componentType": component_type,
        "confirmationLevel": level,
    }


def _payload(**verdict_overrides):
    verdict = {
        "inputGranularity": "PREMISE",
        "validationGranularity": "PREMISE",
        "geocodeGranularity": "PREMISE",
        "addressComplete": True,
        "hasUnconfirmedComponents": False,
        "hasInferredComponents": False,
        "hasReplacedComponents": False,
    }
    verdict.update(verdict_overrides)
    return {
        "result": {
            "verdict": verdict,
            "address": {
                "formattedAddress": "1600 Amphitheatre Pkwy, Mountain View, CA 94043-1351, USA",
                "postalAddress": {
                    "regionCode": "US",
                    "languageCode": "en",
                    "postalCode": "94043-1351",
                    "administrativeArea": "CA",
                    "locality": "Mountain View",
                    "addressLines": ["1600 Amphitheatre Pkwy"],
                },
                "addressComponents": [
                    _component("street_number", "1600"),
                    _component("route", "Amphitheatre Parkway"),
                    _component("locality", "Mountain View"),
                    _component("postal_code", "94043"),
                ],
            },
        }
    }


def test_confirmed_address_is_valid():
    outcome = classify_google_response(_payload())

    assert outcome.status == "VALID"
    assert outcome.corrections == []
    assert outcome.warnings == []
    assert outcome.provider == "google"
    assert outcome.standardized == StandardizedAddress(
        number="1600",
        street="Amphitheatre Parkway",
        city="Mountain View",
        state="CA",
        zip="94043-1351",
    )


def test_replaced_components_are_corrected():
    outcome = classify_google_response(_payload(hasReplacedComponents=True))

    assert outcome.status == "CORRECTED"
    assert outcome.corrections == ["Address components were corrected or replaced"]
    assert outcome.warnings == []


def test_incomplete_address_is_unverifiable():
    outcome = classify_google_response(_payload(addressComplete=False))

    assert outcome.status == "UNVERIFIABLE"
    assert outcome.warnings == ["Address is incomplete"]


def test_replaced_components_do_not_downgrade_unverifiable():
    outcome = classify_google_response(
        _payload(addressComplete=False, hasReplacedComponents=True)
    )

    assert outcome.status == "UNVERIFIABLE"
    assert outcome.warnings == ["Address is incomplete"]
    assert outcome.corrections == ["Address components were corrected or replaced"]


def test_non_us_region_is_unverifiable():
    payload = _payload()
    payload["result"]["address"]["postalAddress"]["regionCode"] = "CA"

    outcome = classify_google_response(payload)

    assert outcome.status == "UNVERIFIABLE"
    assert outcome.warnings == [
        "Non-US address detected (CA). Only US addresses are supported."
    ]


def test_plausible_unconfirmed_components_are_corrected():
    payload = _payload(hasUnconfirmedComponents=True)
    components = payload["result"]["address"]["addressComponents"]
    components[0]["confirmationLevel"] = "UNCONFIRMED_BUT_PLAUSIBLE"

    outcome = classify_google_response(payload)

    assert outcome.status == "CORRECTED"
    assert outcome.warnings == [
        "Address contains unconfirmed but plausible components"
    ]
    assert outcome.corrections == []


def test_suspicious_component_wins_over_plausible_ones():
    payload = _payload(hasUnconfirmedComponents=True)
    components = payload["result"]["address"]["addressComponents"]
    components[0]["confirmationLevel"] = "UNCONFIRMED_BUT_PLAUSIBLE"
    components[1]["confirmationLevel"] = "UNCONFIRMED_AND_SUSPICIOUS"

    outcome = classify_google_response(payload)

    assert outcome.status == "UNVERIFIABLE"
    assert outcome.warnings == ["Address contains suspicious components"]


def test_plausible_components_skip_warning_when_already_corrected():
    payload = _payload(hasUnconfirmedComponents=True, hasReplacedComponents=True)
    components = payload["result"]["address"]["addressComponents"]
    components[0]["confirmationLevel"] = "UNCONFIRMED_BUT_PLAUSIBLE"

    outcome = classify_google_response(payload)

    assert outcome.status == "CORRECTED"
    assert outcome.warnings == []


def test_insufficient_granularity_is_unverifiable():
    for granularity in ("OTHER", "GRANULARITY_UNSPECIFIED"):
        outcome = classify_google_response(_payload(validationGranularity=granularity))

        assert outcome.status == "UNVERIFIABLE"
        assert outcome.warnings == ["Address validation granularity is insufficient"]


def test_all_rules_accumulate_in_evaluation_order():
    payload = _payload(
        addressComplete=False,
        hasReplacedComponents=True,
        hasUnconfirmedComponents=True,
        validationGranularity="OTHER",
    )
    payload["result"]["address"]["postalAddress"]["regionCode"] = "MX"
    payload["result"]["address"]["addressComponents"][1][
        "confirmationLevel"
    ] = "UNCONFIRMED_AND_SUSPICIOUS"

    outcome = classify_google_response(payload)

    assert outcome.status == "UNVERIFIABLE"
    assert outcome.warnings == [
        "Non-US address detected (MX). Only US addresses are supported.",
        "Address is incomplete",
        "Address contains suspicious components",
        "Address validation granularity is insufficient",
    ]
    assert outcome.corrections == ["Address components were corrected or replaced"]


def test_missing_fields_degrade_to_absent_components():
    payload = _payload()
    address = payload["result"]["address"]
    address["addressComponents"] = [_component("route", "Main St")]
    address["postalAddress"] = {"regionCode": "US", "locality": ""}

    outcome = classify_google_response(payload)

    assert outcome.standardized == StandardizedAddress(street="Main St")
    assert outcome.standardized.as_dict() == {"street": "Main St"}


def test_malformed_payload_does_not_raise():
    for payload in ({}, {"result": None}, {"result": {"address": []}}, []):
        outcome = classify_google_response(payload)

        assert outcome.status == "UNVERIFIABLE"
        assert outcome.standardized == StandardizedAddress()


def test_classification_is_repeatable():
    payload = _payload(hasReplacedComponents=True)
    snapshot = copy.deepcopy(payload)

    first = classify_google_response(payload)
    second = classify_google_response(payload)

    assert first == second
    assert payload == snapshot
