"""Service error taxonomy and their HTTP mapping.

Services raise these exceptions; the handlers installed by
:func:`register_exception_handlers` turn them into JSON responses of the
form ``{"detail": ...}``.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    headers: dict[str, str] | None = None

    def __init__(self, detail: Any):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ServiceError):
    """Request input is malformed or violates a field constraint."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ServiceError):
    """Credentials are wrong or the request carries no valid token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class NotFoundError(ServiceError):
    """Entity is absent or owned by somebody else."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    """A unique key is already taken."""

    status_code = status.HTTP_409_CONFLICT


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": jsonable_encoder(exc.detail)},
        headers=exc.headers,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install JSON handlers for service and request validation errors."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
