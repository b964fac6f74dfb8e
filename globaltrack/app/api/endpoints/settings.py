"""
User Settings API Endpoints.

All routes act on the settings of the authenticated user. The record is
created with defaults the first time any route needs it.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from globaltrack.app.core.dependencies import get_current_admin
from globaltrack.app.db.session import get_db
from globaltrack.app.schemas.common import ApiResponse
from globaltrack.app.schemas.settings import ApiKeyResponse, SettingsResponse, SettingsUpdate
from globaltrack.app.services import settings_service

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/", response_model=ApiResponse[SettingsResponse])
async def get_settings(
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    record = await settings_service.ensure_settings(db, current_admin["sub"])
    return ApiResponse(data=SettingsResponse.from_model(record))


@router.patch("/", response_model=ApiResponse[SettingsResponse])
async def update_settings(
    changes: SettingsUpdate,
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Update theme, notifications, dateFormat, timeZone or language."""
    record = await settings_service.update_settings(db, current_admin["sub"], changes)
    return ApiResponse(data=SettingsResponse.from_model(record))


@router.post("/api-key/generate", response_model=ApiResponse[ApiKeyResponse])
async def generate_api_key(
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Replace the API key. The previous key stops being valid."""
    record = await settings_service.regenerate_api_key(db, current_admin["sub"])
    return ApiResponse(data=ApiKeyResponse(api_key=record.api_key, created_at=record.api_key_created_at))


@router.post("/reset", response_model=ApiResponse[SettingsResponse])
async def reset_settings(
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    record = await settings_service.reset_settings(db, current_admin["sub"])
    return ApiResponse(data=SettingsResponse.from_model(record))


@router.delete("/", response_model=ApiResponse[dict])
async def delete_settings(
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await settings_service.delete_settings(db, current_admin["sub"])
    return ApiResponse(data={})
