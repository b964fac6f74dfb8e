"""
User settings service.

Settings are created on first use through ``ensure_settings``; every other
operation goes through it, so callers never see a missing record.
"""

import logging
import secrets
from typing import Any, Dict
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from globaltrack.app.models.settings_enums import DateFormat, Theme
from globaltrack.app.models.shipment import utcnow
from globaltrack.app.models.user_settings import UserSettings
from globaltrack.app.schemas.settings import NotificationPreferences, SettingsUpdate

logger = logging.getLogger("globaltrack.settings")

API_KEY_BYTES = 32


def default_settings() -> Dict[str, Any]:
    """Values a fresh or reset settings record starts from (API key excluded)."""
    return {
        "theme": Theme.SYSTEM,
        "notifications": NotificationPreferences().model_dump(mode="json"),
        "date_format": DateFormat.US,
        "time_zone": "UTC",
        "language": "en-US",
    }


def new_api_key() -> str:
    return secrets.token_hex(API_KEY_BYTES)


async def find_settings(db: AsyncSession, user_id: str):
    result = await db.execute(select(UserSettings).where(UserSettings.user_id == user_id))
    return result.scalar_one_or_none()


async def ensure_settings(db: AsyncSession, user_id: str) -> UserSettings:
    """Return the user's settings, creating the default record if there is none."""
    record = await find_settings(db, user_id)
    if record:
        return record

    record = UserSettings(user_id=user_id, api_key=new_api_key(), **default_settings())
    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info("Created default settings for %s", user_id)
    return record


async def update_settings(db: AsyncSession, user_id: str, changes: SettingsUpdate) -> UserSettings:
    record = await ensure_settings(db, user_id)

    for field in changes.model_fields_set:
        value = getattr(changes, field)
        if value is None:
            continue
        if field == "notifications":
            value = value.model_dump(mode="json")
        setattr(record, field, value)

    record.updated_at = utcnow()
    await db.commit()
    await db.refresh(record)
    return record


async def regenerate_api_key(db: AsyncSession, user_id: str) -> UserSettings:
    record = await ensure_settings(db, user_id)

    record.api_key = new_api_key()
    record.api_key_created_at = utcnow()
    record.api_key_last_used = None

    await db.commit()
    await db.refresh(record)

    logger.info("Regenerated API key for %s", user_id)
    return record


async def reset_settings(db: AsyncSession, user_id: str) -> UserSettings:
    """Restore defaults. The API key survives a reset."""
    record = await ensure_settings(db, user_id)

    for field, value in default_settings().items():
        setattr(record, field, value)
    record.updated_at = utcnow()

    await db.commit()
    await db.refresh(record)
    return record


async def delete_settings(db: AsyncSession, user_id: str) -> bool:
    """Remove the user's settings. Returns False when there was nothing to delete."""
    record = await find_settings(db, user_id)
    if not record:
        return False

    await db.delete(record)
    await db.commit()

    logger.info("Deleted settings for %s", user_id)
    return True
