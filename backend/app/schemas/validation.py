from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from app.domain.address import Provider, ValidationOutcome, ValidationStatus


class ValidateAddressRequest(BaseModel):
    address: str = Field(
        ...,
        min_length=1,
        examples=["1600 Amphitheatre Pkwy, Mountain View, CA 94043"],
    )
    provider: Provider | None = None

    @field_validator("address", mode="before")
    def _strip_address(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip()
        return value


class StandardizedAddressSchema(BaseModel):
    number: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None


class AddressValidationResponse(BaseModel):
    input: str
    standardized: StandardizedAddressSchema = Field(
        default_factory=StandardizedAddressSchema
    )
    status: ValidationStatus
    corrections: list[str] = Field(default_factory=list)
    provider: Provider
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(
        cls, address: str, outcome: ValidationOutcome
    ) -> "AddressValidationResponse":
        return cls(
            input=address,
            standardized=StandardizedAddressSchema(**outcome.standardized.as_dict()),
            status=outcome.status,
            corrections=outcome.corrections,
            provider=outcome.provider,
            warnings=outcome.warnings,
        )


class ErrorResponse(BaseModel):
    error: str
    details: list[str] = Field(default_factory=list)
