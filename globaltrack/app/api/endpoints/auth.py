"""
Authentication API endpoints.

A single admin identity, configured on the server, can log in and receives
a bearer token for the protected tracking and settings routes.
"""

import logging
import secrets
from fastapi import APIRouter, Depends
from globaltrack.app.core.dependencies import (
    ADMIN_SUBJECT,
    AdminCredentials,
    get_admin_credentials,
    get_bearer_token,
    get_current_admin,
)
from globaltrack.app.core.exceptions import (
    AuthenticationError,
    InputValidationError,
    ServerConfigurationError,
)
from globaltrack.app.core.jwt import create_access_token
from globaltrack.app.core.token_revocation import revoke_token
from globaltrack.app.schemas.auth import AdminUser, LoginRequest, LoginResponse, LogoutResponse
from globaltrack.app.schemas.common import ApiResponse

logger = logging.getLogger("globaltrack.auth")

router = APIRouter(prefix="/auth", tags=["Authentication"])


def credentials_match(admin: AdminCredentials, username: str, password: str) -> bool:
    """Username is compared case-insensitively, password exactly."""
    username_ok = username.lower() == admin.username.lower()
    password_ok = secrets.compare_digest(password.encode(), admin.password.encode())
    return username_ok and password_ok


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(
    credentials: LoginRequest,
    admin: AdminCredentials = Depends(get_admin_credentials),
):
    """
    Log in as the admin and return a JWT.

    - 400 when username or password is missing
    - 500 when the server has no admin identity configured
    - 401 on mismatch
    """
    if not credentials.username or not credentials.password:
        raise InputValidationError("Please provide username and password!")

    if not admin.is_configured:
        logger.error("ADMIN_USERNAME or ADMIN_PASSWORD is not configured")
        raise ServerConfigurationError()

    if not credentials_match(admin, credentials.username, credentials.password):
        logger.warning("Failed login attempt for username %r", credentials.username)
        raise AuthenticationError("Incorrect username or password")

    token = create_access_token(data={"sub": ADMIN_SUBJECT, "username": admin.username})
    logger.info("Admin %s logged in", admin.username)

    return ApiResponse(data=LoginResponse(
        token=token,
        user=AdminUser(id=ADMIN_SUBJECT, username=admin.username),
    ))


@router.post("/logout", response_model=ApiResponse[LogoutResponse])
async def logout(
    current_admin: dict = Depends(get_current_admin),
    token: str = Depends(get_bearer_token),
):
    """Revoke the presented token for the rest of its lifetime."""
    revoked = await revoke_token(token, current_admin["sub"])
    return ApiResponse(data=LogoutResponse(revoked=revoked))


@router.get("/me", response_model=ApiResponse[AdminUser])
async def get_current_admin_info(current_admin: dict = Depends(get_current_admin)):
    """Identity carried by the bearer token."""
    return ApiResponse(data=AdminUser(
        id=current_admin["sub"],
        username=current_admin.get("username", ""),
    ))
