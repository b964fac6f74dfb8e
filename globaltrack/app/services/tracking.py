"""
Shipment lifecycle operations.

Every operation is a single read-modify-write against one shipment row.
There is no locking: concurrent updates to the same shipment are last
write wins.
"""

import logging
from datetime import datetime, timezone
from typing import List, Tuple
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from globaltrack.app.core.exceptions import (
    DuplicateTrackingIdError,
    InputValidationError,
    ResourceNotFoundError,
)
from globaltrack.app.models.shipment import Shipment
from globaltrack.app.models.shipment_enums import ShipmentStatus
from globaltrack.app.schemas.shipment import (
    HistoryEntry,
    ShipmentCreate,
    ShipmentFilter,
    ShipmentUpdate,
    StatusUpdate,
)
from globaltrack.app.services.progress import calculate_progress
from globaltrack.app.services.tracking_id import generate_unique_tracking_id, tracking_id_exists

logger = logging.getLogger("globaltrack.tracking")

RESOURCE = "Tracking"
CREATED_DESCRIPTION = "Shipment created"

# Columns that may be changed through update_shipment but never cleared
REQUIRED_FIELDS = frozenset({
    "shipment_type", "shipment_date", "estimated_delivery", "weight",
    "current_status", "sender", "receiver", "origin", "destination",
})


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _dump(value):
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def _history_entry(status: ShipmentStatus, location, description: str, timestamp: datetime) -> dict:
    entry = HistoryEntry(status=status, location=location, description=description, timestamp=timestamp)
    return entry.model_dump(mode="json")


def _status_description(status: ShipmentStatus) -> str:
    return f"Status updated to {ShipmentStatus(status).value}"


def _refresh_progress(shipment: Shipment, now: datetime) -> None:
    shipment.progress = calculate_progress(
        shipment.current_status,
        shipment.shipment_date,
        shipment.estimated_delivery,
        now,
        shipment.progress,
    )


async def _commit(db: AsyncSession, tracking_id: str) -> None:
    try:
        await db.commit()
    except IntegrityError:
        # Unique index on tracking_id lost a race with a concurrent insert
        await db.rollback()
        raise DuplicateTrackingIdError(tracking_id)


async def create_shipment(db: AsyncSession, data: ShipmentCreate) -> Shipment:
    """
    Persist a new shipment.

    Generates a tracking ID when none is given, seeds the history with a
    "Shipment created" entry at the origin and computes initial progress.

    Raises:
        DuplicateTrackingIdError: the explicit tracking ID is already stored
        TrackingIdGenerationError: no free tracking ID within the retry budget
    """
    tracking_id = data.tracking_id
    if tracking_id is None:
        tracking_id = await generate_unique_tracking_id(db)
    elif await tracking_id_exists(db, tracking_id):
        raise DuplicateTrackingIdError(tracking_id)

    now = _now()
    origin = _dump(data.origin)

    shipment = Shipment(
        tracking_id=tracking_id,
        shipment_type=data.shipment_type,
        shipment_date=data.shipment_date,
        estimated_delivery=data.estimated_delivery,
        weight=data.weight,
        dimensions=data.dimensions,
        package_description=data.package_description,
        notes=data.notes,
        current_status=data.current_status,
        sender=_dump(data.sender),
        receiver=_dump(data.receiver),
        origin=origin,
        destination=_dump(data.destination),
        current_location=_dump(data.current_location),
        history=[_history_entry(data.current_status, origin, CREATED_DESCRIPTION, now)],
        progress=calculate_progress(
            data.current_status, data.shipment_date, data.estimated_delivery, now
        ),
    )

    db.add(shipment)
    await _commit(db, tracking_id)
    await db.refresh(shipment)

    logger.info("Created shipment %s (id=%s)", shipment.tracking_id, shipment.id)
    return shipment


async def get_shipment(db: AsyncSession, shipment_id: int) -> Shipment:
    result = await db.execute(select(Shipment).where(Shipment.id == shipment_id))
    shipment = result.scalar_one_or_none()

    if not shipment:
        raise ResourceNotFoundError(RESOURCE, shipment_id)

    return shipment


async def get_shipment_by_tracking_id(db: AsyncSession, tracking_id: str) -> Shipment:
    result = await db.execute(select(Shipment).where(Shipment.tracking_id == tracking_id))
    shipment = result.scalar_one_or_none()

    if not shipment:
        raise ResourceNotFoundError(RESOURCE, tracking_id)

    return shipment


def _filter_conditions(filters: ShipmentFilter) -> list:
    conditions = []

    if filters.status:
        conditions.append(Shipment.current_status == filters.status)

    if filters.start_date:
        conditions.append(Shipment.shipment_date >= filters.start_date)
    if filters.end_date:
        conditions.append(Shipment.shipment_date <= filters.end_date)

    if filters.search:
        term = filters.search.strip()
        conditions.append(or_(
            Shipment.tracking_id.icontains(term, autoescape=True),
            Shipment.sender["name"].as_string().icontains(term, autoescape=True),
            Shipment.receiver["name"].as_string().icontains(term, autoescape=True),
        ))

    return conditions


async def list_shipments(
    db: AsyncSession,
    filters: ShipmentFilter,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Shipment], int]:
    """
    Filter and paginate shipments, newest first.

    Returns:
        (shipments on the requested page, total number of matches)
    """
    conditions = _filter_conditions(filters)

    count_query = select(func.count(Shipment.id)).where(*conditions)
    total = (await db.execute(count_query)).scalar() or 0

    offset = (page - 1) * limit
    query = (
        select(Shipment)
        .where(*conditions)
        .order_by(Shipment.created_at.desc(), Shipment.id.desc())
        .offset(offset)
        .limit(limit)
    )
    shipments = (await db.execute(query)).scalars().all()

    return list(shipments), total


async def update_shipment(db: AsyncSession, shipment_id: int, patch: ShipmentUpdate) -> Shipment:
    """
    Apply the fields present in ``patch`` and recompute progress.

    A change of ``currentStatus`` appends a history entry, same as set_status.

    Raises:
        InputValidationError: a required field was explicitly set to null
        ResourceNotFoundError: no shipment with this id
    """
    nulled = sorted(
        field for field in patch.model_fields_set
        if field in REQUIRED_FIELDS and getattr(patch, field) is None
    )
    if nulled:
        raise InputValidationError([f"{to_camel(field)}: Field may not be null" for field in nulled])

    shipment = await get_shipment(db, shipment_id)
    previous_status = shipment.current_status
    now = _now()

    for field in patch.model_fields_set:
        setattr(shipment, field, _dump(getattr(patch, field)))

    if shipment.current_status != previous_status:
        location = shipment.current_location or shipment.origin
        shipment.history = [
            *shipment.history,
            _history_entry(shipment.current_status, location, _status_description(shipment.current_status), now),
        ]

    _refresh_progress(shipment, now)

    await _commit(db, shipment.tracking_id)
    await db.refresh(shipment)

    logger.info("Updated shipment %s fields=%s", shipment.tracking_id, sorted(patch.model_fields_set))
    return shipment


async def _record_status(db: AsyncSession, shipment_id: int, update: StatusUpdate) -> Shipment:
    if update.status is None:
        raise InputValidationError("Status is required")

    shipment = await get_shipment(db, shipment_id)
    now = _now()

    location = _dump(update.location) or shipment.current_location or shipment.origin
    description = update.description or _status_description(update.status)

    shipment.history = [
        *shipment.history,
        _history_entry(update.status, location, description, now),
    ]
    shipment.current_status = update.status
    if update.location:
        shipment.current_location = _dump(update.location)

    _refresh_progress(shipment, now)

    await _commit(db, shipment.tracking_id)
    await db.refresh(shipment)

    logger.info("Shipment %s status -> %s", shipment.tracking_id, shipment.current_status.value)
    return shipment


async def set_status(db: AsyncSession, shipment_id: int, update: StatusUpdate) -> Shipment:
    """
    Move a shipment to a new status.

    Appends a history entry (location defaults to the current location, then
    the origin), updates the current location when one is given and
    recomputes progress.

    Raises:
        InputValidationError: status missing
        ResourceNotFoundError: no shipment with this id
    """
    return await _record_status(db, shipment_id, update)


async def append_history(db: AsyncSession, shipment_id: int, update: StatusUpdate) -> Shipment:
    """Add a history entry. Same effect as set_status; kept as its own endpoint."""
    return await _record_status(db, shipment_id, update)


async def delete_shipment(db: AsyncSession, shipment_id: int) -> None:
    shipment = await get_shipment(db, shipment_id)

    await db.delete(shipment)
    await db.commit()

    logger.info("Deleted shipment %s (id=%s)", shipment.tracking_id, shipment_id)
