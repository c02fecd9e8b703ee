"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to. The API renders them as
``{"error": message}``.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class LostToFoundError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(LostToFoundError):
    """A required credential or identifier is not configured."""


class ValidationError(LostToFoundError):
    status_code = status.HTTP_400_BAD_REQUEST


class ReportValidationError(ValidationError):
    pass


class EntitlementError(LostToFoundError):
    """The account's plan does not allow the requested action."""

    status_code = status.HTTP_403_FORBIDDEN


class AuthenticationError(LostToFoundError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ConflictError(LostToFoundError):
    status_code = status.HTTP_409_CONFLICT


class PetNotFoundError(LostToFoundError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Pet not found") -> None:
        super().__init__(message)


class UpstreamError(LostToFoundError):
    """An external service (payments, storage, database) reported failure."""


async def lost_to_found_error_handler(_request: Request, exc: LostToFoundError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (404 routes, owner lookups) in the same envelope."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request."
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={"error": message},
    )
