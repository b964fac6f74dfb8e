"""
Custom exceptions and error handlers for consistent error responses.

Every error leaves the API in the same envelope:
    {"success": false, "error": "<message>" | ["<message>", ...]}
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, List, Union

logger = logging.getLogger("globaltrack.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: Union[str, List[str]],
        error_code: str,
        status_code: int = 500,
        details: Dict[str, Any] = None
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message if isinstance(message, str) else "; ".join(message))


class InputValidationError(AppException):
    """Raised when request data is missing or malformed."""

    def __init__(self, message: Union[str, List[str]], details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class DuplicateTrackingIdError(AppException):
    """Raised when an explicit tracking ID is already in use."""

    def __init__(self, tracking_id: str):
        super().__init__(
            message="Tracking ID already exists. Please use a different ID or let the system generate one.",
            error_code="ERR_DUPLICATE_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"tracking_id": tracking_id}
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(
            message=f"{resource} not found",
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class AuthenticationError(AppException):
    """Raised for authentication failures."""

    def __init__(self, message: str = "Authentication failed", error_code: str = "ERR_AUTH_001"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class MissingTokenError(AuthenticationError):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self):
        super().__init__(
            message="You are not logged in! Please log in to get access.",
            error_code="ERR_AUTH_002"
        )


class InvalidTokenError(AuthenticationError):
    """Raised when the bearer token cannot be decoded or verified."""

    def __init__(self):
        super().__init__(
            message="Invalid token. Please log in again!",
            error_code="ERR_AUTH_003"
        )


class TokenExpiredError(AuthenticationError):
    """Raised when the bearer token is past its expiry."""

    def __init__(self):
        super().__init__(
            message="Your token has expired! Please log in again.",
            error_code="ERR_AUTH_004"
        )


class TokenRevokedError(AuthenticationError):
    """Raised when token has been revoked."""

    def __init__(self):
        super().__init__(
            message="Token has been revoked",
            error_code="ERR_AUTH_005"
        )


class InsufficientPermissionsError(AppException):
    """Raised when user doesn't have permission to perform an action."""

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN
        )


class TrackingIdGenerationError(AppException):
    """Raised when no unused tracking ID was found within the retry budget."""

    def __init__(self, attempts: int):
        super().__init__(
            message="Failed to generate unique tracking ID",
            error_code="ERR_TRACKING_ID_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"attempts": attempts}
        )


class ServerConfigurationError(AppException):
    """Raised when required server configuration is absent."""

    def __init__(self, message: str = "Server configuration error."):
        super().__init__(
            message=message,
            error_code="ERR_CONFIG_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


def error_response(status_code: int, error: Union[str, List[str]], headers: Dict[str, str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers
    )


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[str]:
    """Flatten pydantic error dicts into "<field path>: <message>" strings."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
    return messages


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    if exc.status_code >= 500:
        logger.error("%s: %s %s", exc.error_code, exc.message, exc.details)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(exc.status_code, exc.message, headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handler for HTTP errors raised by routing or by FastAPI itself."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, "Route not found")

    return error_response(exc.status_code, exc.detail, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return error_response(status.HTTP_400_BAD_REQUEST, format_validation_errors(exc.errors()))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception on %s %s: %s", request.method, request.url.path, type(exc).__name__
    )

    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")
