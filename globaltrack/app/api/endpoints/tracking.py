"""
Shipment Tracking API Endpoints.

Lookups by tracking number or id are public; everything else requires the
admin bearer token. Static paths are declared before ``/{shipment_id}`` so
they are never captured by it.
"""

import math
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from globaltrack.app.core.dependencies import get_current_admin
from globaltrack.app.db.session import get_db
from globaltrack.app.models.shipment_enums import ShipmentStatus
from globaltrack.app.schemas.common import ApiResponse
from globaltrack.app.schemas.shipment import (
    DashboardStats,
    PaginationMeta,
    ShipmentCreate,
    ShipmentFilter,
    ShipmentListResponse,
    ShipmentResponse,
    ShipmentUpdate,
    StatusUpdate,
    TrackingIdResponse,
)
from globaltrack.app.services import tracking as tracking_service
from globaltrack.app.services.analytics import AnalyticsService
from globaltrack.app.services.tracking_id import generate_unique_tracking_id

router = APIRouter(prefix="/tracking", tags=["Tracking"])


# PUBLIC ROUTES

@router.get("/number/{tracking_id}", response_model=ApiResponse[ShipmentResponse])
async def get_tracking_by_number(
    tracking_id: str = Path(..., description="Public tracking number, e.g. GT-7K2M9QX4AB"),
    db: AsyncSession = Depends(get_db)
):
    """Look up a shipment by its tracking number (for customers)."""
    shipment = await tracking_service.get_shipment_by_tracking_id(db, tracking_id)
    return ApiResponse(data=ShipmentResponse.model_validate(shipment))


# PROTECTED STATIC ROUTES

@router.get("/generate-id", response_model=ApiResponse[TrackingIdResponse])
async def generate_tracking_id(
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Generate a tracking ID not used by any stored shipment."""
    tracking_id = await generate_unique_tracking_id(db)
    return ApiResponse(data=TrackingIdResponse(tracking_id=tracking_id))


@router.get("/stats/dashboard", response_model=ApiResponse[DashboardStats])
async def get_dashboard_stats(
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    stats = await AnalyticsService.get_dashboard_stats(db)
    return ApiResponse(data=stats)


@router.get("/{shipment_id}", response_model=ApiResponse[ShipmentResponse])
async def get_tracking_by_id(
    shipment_id: int = Path(..., description="Shipment ID"),
    db: AsyncSession = Depends(get_db)
):
    """Get a shipment by its database id (public)."""
    shipment = await tracking_service.get_shipment(db, shipment_id)
    return ApiResponse(data=ShipmentResponse.model_validate(shipment))


# PROTECTED ROUTES

@router.post("/", response_model=ApiResponse[ShipmentResponse], status_code=status.HTTP_201_CREATED)
async def create_tracking(
    shipment_data: ShipmentCreate,
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new shipment.

    A tracking ID is generated when the body does not carry one; an explicit
    ID must be unused.
    """
    shipment = await tracking_service.create_shipment(db, shipment_data)
    return ApiResponse(data=ShipmentResponse.model_validate(shipment))


@router.get("/", response_model=ShipmentListResponse)
async def list_trackings(
    status_filter: Optional[ShipmentStatus] = Query(None, alias="status"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None, description="Matches tracking ID, sender or receiver name"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """List shipments, newest first, with optional filters."""
    filters = ShipmentFilter(
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
        search=search or None,
    )
    shipments, total = await tracking_service.list_shipments(db, filters, page=page, limit=limit)

    return ShipmentListResponse(
        count=len(shipments),
        total=total,
        pagination=PaginationMeta(page=page, limit=limit, total_pages=math.ceil(total / limit)),
        data=[ShipmentResponse.model_validate(s) for s in shipments],
    )


@router.put("/{shipment_id}", response_model=ApiResponse[ShipmentResponse])
async def update_tracking(
    shipment_id: int = Path(..., description="Shipment ID"),
    shipment_data: ShipmentUpdate = ...,
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Update shipment fields. History cannot be replaced through this route."""
    shipment = await tracking_service.update_shipment(db, shipment_id, shipment_data)
    return ApiResponse(data=ShipmentResponse.model_validate(shipment))


@router.patch("/{shipment_id}/status", response_model=ApiResponse[ShipmentResponse])
async def update_tracking_status(
    shipment_id: int = Path(..., description="Shipment ID"),
    status_data: StatusUpdate = ...,
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    shipment = await tracking_service.set_status(db, shipment_id, status_data)
    return ApiResponse(data=ShipmentResponse.model_validate(shipment))


@router.post("/{shipment_id}/history", response_model=ApiResponse[ShipmentResponse])
async def add_tracking_history(
    shipment_id: int = Path(..., description="Shipment ID"),
    history_data: StatusUpdate = ...,
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    shipment = await tracking_service.append_history(db, shipment_id, history_data)
    return ApiResponse(data=ShipmentResponse.model_validate(shipment))


@router.delete("/{shipment_id}", response_model=ApiResponse[dict])
async def delete_tracking(
    shipment_id: int = Path(..., description="Shipment ID"),
    current_admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await tracking_service.delete_shipment(db, shipment_id)
    return ApiResponse(data={})
