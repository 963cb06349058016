from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Literal


Provider = Literal["google", "smarty"]
ValidationStatus = Literal["VALID", "CORRECTED", "UNVERIFIABLE"]

PROVIDERS: tuple[Provider, ...] = ("google", "smarty")

STATUS_SEVERITY: dict[ValidationStatus, int] = {
    "VALID": 0,
    "CORRECTED": 1,
    "UNVERIFIABLE": 2,
}


def most_severe(
    current: ValidationStatus, candidate: ValidationStatus
) -> ValidationStatus:
    """Return whichever status is more severe; ties keep ``current``."""

    if STATUS_SEVERITY[candidate] > STATUS_SEVERITY[current]:
        return candidate
    return current


@dataclass(slots=True, frozen=True)
class StandardizedAddress:
    number: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Return only the components the provider actually resolved."""

        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(slots=True, frozen=True)
class ValidationOutcome:
    """Canonical verdict produced by one provider for one address."""

    standardized: StandardizedAddress
    status: ValidationStatus
    provider: Provider
    corrections: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
