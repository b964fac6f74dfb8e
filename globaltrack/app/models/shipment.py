"""
Shipment database model.

Contacts, locations and the status history are stored as JSON documents
on the shipment row; they are always read and written as a whole.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, Text, JSON
from globaltrack.app.db.session import Base
from globaltrack.app.models.shipment_enums import ShipmentStatus, ShipmentType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Shipment(Base):
    """
    A tracked shipment.

    ``history`` is append-only: new entries are added by assigning a new
    list (JSON columns do not track in-place mutation).
    """
    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Public identifier, GT-XXXXXXXXXX
    tracking_id = Column(String(13), unique=True, nullable=False, index=True)

    shipment_type = Column(
        Enum(ShipmentType, name="shipment_type", values_callable=_enum_values),
        nullable=False
    )
    shipment_date = Column(DateTime(timezone=True), nullable=False, index=True)
    estimated_delivery = Column(DateTime(timezone=True), nullable=False, index=True)

    # Package
    weight = Column(Float, nullable=False)
    dimensions = Column(String(255), nullable=True)
    package_description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Status
    current_status = Column(
        Enum(ShipmentStatus, name="shipment_status", values_callable=_enum_values),
        default=ShipmentStatus.PROCESSING,
        nullable=False,
        index=True
    )
    progress = Column(Integer, default=0, nullable=False)

    # Parties and places
    sender = Column(JSON, nullable=False)
    receiver = Column(JSON, nullable=False)
    origin = Column(JSON, nullable=False)
    destination = Column(JSON, nullable=False)
    current_location = Column(JSON, nullable=True)

    history = Column(JSON, default=list, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Shipment(id={self.id}, tracking_id='{self.tracking_id}', status='{self.current_status.value}')>"
