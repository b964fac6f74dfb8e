"""
Shipment progress derivation.

Progress is an integer percentage derived from the current status and, for
shipments in transit, from how much of the scheduled journey has elapsed.
"""

from datetime import datetime, timezone
from typing import Optional
from globaltrack.app.models.shipment_enums import ShipmentStatus

IN_TRANSIT_MIN = 10
IN_TRANSIT_MAX = 90
ON_HOLD_DEFAULT = 50
ON_HOLD_CAP = 75

FIXED_PROGRESS = {
    ShipmentStatus.DELIVERED: 100,
    ShipmentStatus.PROCESSING: 10,
    ShipmentStatus.OUT_FOR_DELIVERY: 90,
}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def calculate_progress(
    status: ShipmentStatus,
    shipment_date: datetime,
    estimated_delivery: datetime,
    now: datetime,
    prior_progress: Optional[int] = None,
) -> int:
    """
    Compute progress (0-100) for a shipment.

    - delivered: 100, processing: 10, out-for-delivery: 90
    - in-transit: elapsed / scheduled time, floored, clamped to [10, 90].
      A zero or negative schedule counts as fully elapsed (90).
    - on-hold: prior progress (50 when there is none) capped at 75
    - delayed, cancelled, returned: prior progress unchanged
    """
    status = ShipmentStatus(status)

    if status in FIXED_PROGRESS:
        return FIXED_PROGRESS[status]

    if status == ShipmentStatus.IN_TRANSIT:
        start = _as_utc(shipment_date)
        total = _as_utc(estimated_delivery) - start
        if total.total_seconds() <= 0:
            return IN_TRANSIT_MAX
        progress = (100 * (_as_utc(now) - start)) // total
        return max(IN_TRANSIT_MIN, min(IN_TRANSIT_MAX, progress))

    if status == ShipmentStatus.ON_HOLD:
        return min(prior_progress or ON_HOLD_DEFAULT, ON_HOLD_CAP)

    return prior_progress if prior_progress is not None else 0
