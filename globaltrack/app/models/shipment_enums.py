"""
Shipment enumerations.
"""

import enum


class ShipmentStatus(str, enum.Enum):
    """
    Shipment status enumeration.

    No transition graph is enforced: any status may follow any other.
    """
    PROCESSING = "processing"
    IN_TRANSIT = "in-transit"
    OUT_FOR_DELIVERY = "out-for-delivery"
    DELIVERED = "delivered"
    DELAYED = "delayed"
    ON_HOLD = "on-hold"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class ShipmentType(str, enum.Enum):
    """Service level the shipment was booked with."""
    STANDARD = "standard"
    EXPRESS = "express"
    PRIORITY = "priority"
    ECONOMY = "economy"


# Statuses counted as "active" on the dashboard
ACTIVE_STATUSES = (
    ShipmentStatus.PROCESSING,
    ShipmentStatus.IN_TRANSIT,
    ShipmentStatus.OUT_FOR_DELIVERY,
    ShipmentStatus.DELAYED,
)
