from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import router
from app.core.config import get_settings
from app.core.logging import bind_request_context, configure_logging, get_logger
from app.services.providers import (
    AllProvidersFailedError,
    ProviderError,
    ProviderNotConfiguredError,
)
from app.services.validation_service import build_address_validation_service


settings = get_settings()
configure_logging(settings.debug)

_logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    async with httpx.AsyncClient(timeout=settings.provider_timeout) as client:
        app.state.validation_service = build_address_validation_service(
            settings, client
        )
        _logger.info(
            "Address validation service ready", environment=settings.environment
        )
        yield


app = FastAPI(
    title="Addrcheck API",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = bind_request_context(
        request.headers.get("x-request-id"),
        method=request.method,
        path=request.url.path,
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _error_response(status_code: int, error: str, details: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": error, "details": details}
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in error['loc']) or 'root'}: {error['msg']}"
        for error in exc.errors()
    ]
    if len(details) == 1:
        message = f"Invalid input: {details[0]}"
    else:
        message = f"Invalid input ({len(details)} errors)"
    return _error_response(status.HTTP_400_BAD_REQUEST, message, details)


@app.exception_handler(ProviderNotConfiguredError)
async def handle_not_configured(
    request: Request, exc: ProviderNotConfiguredError
) -> JSONResponse:
    _logger.error(
        "Address provider not configured", provider=exc.provider, error=str(exc)
    )
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Service temporarily unavailable",
        [str(exc)],
    )


@app.exception_handler(AllProvidersFailedError)
async def handle_all_failed(
    request: Request, exc: AllProvidersFailedError
) -> JSONResponse:
    _logger.error("Address validation failed on every provider", error=str(exc))
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Unable to validate address",
        [str(exc)],
    )


@app.exception_handler(ProviderError)
async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    _logger.error("Address provider error", provider=exc.provider, error=str(exc))
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An error occurred while validating the address",
        [str(exc)],
    )


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Return basic service health."""

    return {"status": "ok"}
