"""
Per-user dashboard settings.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON
from globaltrack.app.db.session import Base
from globaltrack.app.models.settings_enums import Theme, DateFormat
from globaltrack.app.models.shipment import utcnow


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class UserSettings(Base):
    """One settings record per authenticated user (keyed by token subject)."""
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String(100), unique=True, nullable=False, index=True)

    theme = Column(Enum(Theme, name="theme", values_callable=_enum_values), default=Theme.SYSTEM, nullable=False)
    notifications = Column(JSON, nullable=False)
    date_format = Column(
        Enum(DateFormat, name="date_format", values_callable=_enum_values),
        default=DateFormat.US,
        nullable=False
    )
    time_zone = Column(String(64), default="UTC", nullable=False)
    language = Column(String(16), default="en-US", nullable=False)

    # API key
    api_key = Column(String(64), nullable=False)
    api_key_created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    api_key_last_used = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<UserSettings(user_id='{self.user_id}', theme='{self.theme.value}')>"
