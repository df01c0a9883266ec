"""Application error kinds and their HTTP mapping."""

import logging
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse, Response

from src.config import SESSION_COOKIE_NAME

logger = logging.getLogger(__name__)


class AuthPolicy(str, Enum):
    """How a route answers a request that fails authentication."""

    API = "api"
    INTERACTIVE = "interactive"


class AppError(Exception):
    """Base class for errors that map to a stable kind and status code."""

    kind = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class ValidationError(AppError):
    """Missing or malformed request fields."""

    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, details: list[dict] | None = None):
        super().__init__(message)
        self.details = details or []

    @classmethod
    def from_errors(cls, errors: list[dict], message: str | None = None) -> "ValidationError":
        """Build from pydantic/FastAPI error dicts."""
        details = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
                "message": error.get("msg", "Invalid value"),
            }
            for error in errors
        ]
        return cls(message, details)

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.details:
            body["details"] = self.details
        return body


class AuthError(AppError):
    """Missing, invalid or expired credentials."""

    kind = "auth_error"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid authentication credentials"

    def __init__(self, message: str | None = None, policy: AuthPolicy = AuthPolicy.API):
        super().__init__(message)
        self.policy = policy


class InvalidTokenError(AuthError):
    """Token is malformed, has a bad signature, or has expired."""

    default_message = "Invalid or expired token"


class NotFoundError(AppError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class StoreError(AppError):
    """The backing store failed; details stay in the server log."""

    kind = "store_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal storage error"


def error_response(exc: AppError) -> JSONResponse:
    """Render an application error as a JSON response."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> Response:
    """Map application errors to responses, honouring the auth policy."""
    if isinstance(exc, AuthError) and exc.policy == AuthPolicy.INTERACTIVE:
        settings = request.app.state.settings
        response = RedirectResponse(settings.login_path, status_code=status.HTTP_303_SEE_OTHER)
        if SESSION_COOKIE_NAME in request.cookies:
            response.delete_cookie(SESSION_COOKIE_NAME)
        return response
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> Response:
    """Answer FastAPI body/query validation failures with a 400."""
    return error_response(ValidationError.from_errors(exc.errors()))


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    """Last resort: log the traceback, return a generic body."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=AppError().to_dict(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the error handlers on an application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
