"""
User settings Pydantic schemas.
"""

from pydantic import Field
from typing import Optional
from globaltrack.app.models.settings_enums import DateFormat, EmailFrequency, Theme
from globaltrack.app.models.user_settings import UserSettings
from globaltrack.app.schemas.common import CamelModel, UtcDatetime


class EmailNotifications(CamelModel):
    enabled: bool = True
    frequency: EmailFrequency = EmailFrequency.IMMEDIATE


class ChannelToggle(CamelModel):
    enabled: bool


class NotificationPreferences(CamelModel):
    """Omitted channels fall back to their defaults."""
    email: EmailNotifications = Field(default_factory=EmailNotifications)
    sms: ChannelToggle = Field(default_factory=lambda: ChannelToggle(enabled=False))
    push: ChannelToggle = Field(default_factory=lambda: ChannelToggle(enabled=True))


class SettingsUpdate(CamelModel):
    """Fields a user may change. Anything else in the body is ignored."""
    theme: Optional[Theme] = None
    notifications: Optional[NotificationPreferences] = None
    date_format: Optional[DateFormat] = None
    time_zone: Optional[str] = Field(None, min_length=1, max_length=64)
    language: Optional[str] = Field(None, min_length=2, max_length=16)


class ApiKeyInfo(CamelModel):
    key: str
    created_at: UtcDatetime
    last_used: Optional[UtcDatetime] = None


class ApiKeyResponse(CamelModel):
    api_key: str
    created_at: UtcDatetime


class SettingsResponse(CamelModel):
    user_id: str
    theme: Theme
    notifications: NotificationPreferences
    api_key: ApiKeyInfo
    date_format: DateFormat
    time_zone: str
    language: str
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @classmethod
    def from_model(cls, record: UserSettings) -> "SettingsResponse":
        return cls(
            user_id=record.user_id,
            theme=record.theme,
            notifications=record.notifications,
            api_key=ApiKeyInfo(
                key=record.api_key,
                created_at=record.api_key_created_at,
                last_used=record.api_key_last_used,
            ),
            date_format=record.date_format,
            time_zone=record.time_zone,
            language=record.language,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
