from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.address import (
    Provider,
    StandardizedAddress,
    ValidationOutcome,
    ValidationStatus,
    most_severe,
)


@dataclass(slots=True)
class StatusAccumulator:
    """Collect the verdict of a single classification pass.

    Rules are evaluated one after another against the same accumulator. The
    status can only move towards ``UNVERIFIABLE``; notes are kept in the
    order the rules fired.
    """

    status: ValidationStatus = "VALID"
    corrections: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def escalate(self, status: ValidationStatus) -> None:
        self.status = most_severe(self.status, status)

    def correct(self, note: str, status: ValidationStatus | None = None) -> None:
        if status is not None:
            self.escalate(status)
        self.corrections.append(note)

    def warn(self, note: str, status: ValidationStatus | None = None) -> None:
        if status is not None:
            self.escalate(status)
        self.warnings.append(note)

    @property
    def is_valid(self) -> bool:
        return self.status == "VALID"

    def finish(
        self, standardized: StandardizedAddress, provider: Provider
    ) -> ValidationOutcome:
        return ValidationOutcome(
            standardized=standardized,
            status=self.status,
            provider=provider,
            corrections=list(self.corrections),
            warnings=list(self.warnings),
        )


def mapping_or_empty(value: object) -> dict:
    """Coerce a JSON node to a dict, treating anything else as empty."""

    return value if isinstance(value, dict) else {}


def text_or_none(value: object) -> str | None:
    """Return non-empty strings untouched; every other value is absent."""

    if isinstance(value, str) and value:
        return value
    return None
