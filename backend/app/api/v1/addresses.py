from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from app.schemas.validation import (
    AddressValidationResponse,
    ErrorResponse,
    ValidateAddressRequest,
)
from app.services.validation_service import AddressValidationService


router = APIRouter()


def get_service(request: Request) -> AddressValidationService:
    return request.app.state.validation_service


@router.post(
    "/validate",
    response_model=AddressValidationResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def validate_address(
    payload: ValidateAddressRequest,
    service: AddressValidationService = Depends(get_service),
) -> AddressValidationResponse:
    outcome = await service.validate(payload.address, payload.provider)
    return AddressValidationResponse.from_outcome(payload.address, outcome)
