"""
Shipment Pydantic schemas.

Defines request and response models for the tracking endpoints.
"""

from pydantic import EmailStr, Field, field_validator
from typing import Dict, List, Optional
from globaltrack.app.models.shipment_enums import ShipmentStatus, ShipmentType
from globaltrack.app.schemas.common import CamelModel, UtcDatetime
from globaltrack.app.services.tracking_id import is_valid_tracking_id


class AddressInfo(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class ContactInfo(CamelModel):
    """Sender or receiver."""
    name: str = Field(..., min_length=1, max_length=200)
    company: Optional[str] = None
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    address: Optional[AddressInfo] = None


class LocationInfo(CamelModel):
    """A named point on the map."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    name: str = Field(..., min_length=1, max_length=255)


class HistoryEntry(CamelModel):
    status: ShipmentStatus
    location: Optional[LocationInfo] = None
    description: Optional[str] = None
    timestamp: UtcDatetime


class ShipmentCreate(CamelModel):
    """Schema for creating a new shipment. ``trackingId`` is generated when omitted."""
    tracking_id: Optional[str] = None
    shipment_type: ShipmentType
    shipment_date: UtcDatetime
    estimated_delivery: UtcDatetime
    weight: float = Field(..., gt=0, description="Weight in kilograms")
    dimensions: Optional[str] = Field(None, max_length=255)
    package_description: Optional[str] = None
    notes: Optional[str] = None
    current_status: ShipmentStatus = ShipmentStatus.PROCESSING
    sender: ContactInfo
    receiver: ContactInfo
    origin: LocationInfo
    destination: LocationInfo
    current_location: Optional[LocationInfo] = None

    @field_validator("tracking_id")
    @classmethod
    def check_tracking_id_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_tracking_id(value):
            raise ValueError(
                f"{value} is not a valid tracking ID format! "
                "Format should be GT-XXXXXXXXXX where X is alphanumeric"
            )
        return value


class ShipmentUpdate(CamelModel):
    """
    Schema for updating an existing shipment.

    These are the only fields the update endpoint can change; trackingId,
    history, progress and timestamps are not writable here.
    """
    shipment_type: Optional[ShipmentType] = None
    shipment_date: Optional[UtcDatetime] = None
    estimated_delivery: Optional[UtcDatetime] = None
    weight: Optional[float] = Field(None, gt=0)
    dimensions: Optional[str] = Field(None, max_length=255)
    package_description: Optional[str] = None
    notes: Optional[str] = None
    current_status: Optional[ShipmentStatus] = None
    sender: Optional[ContactInfo] = None
    receiver: Optional[ContactInfo] = None
    origin: Optional[LocationInfo] = None
    destination: Optional[LocationInfo] = None
    current_location: Optional[LocationInfo] = None


class StatusUpdate(CamelModel):
    """Body of the status and history endpoints."""
    status: Optional[ShipmentStatus] = None
    location: Optional[LocationInfo] = None
    description: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def blank_status_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ShipmentFilter(CamelModel):
    status: Optional[ShipmentStatus] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    search: Optional[str] = None


class ShipmentResponse(CamelModel):
    """Schema for shipment response."""
    id: int
    tracking_id: str
    shipment_type: ShipmentType
    shipment_date: UtcDatetime
    estimated_delivery: UtcDatetime
    weight: float
    dimensions: Optional[str] = None
    package_description: Optional[str] = None
    notes: Optional[str] = None
    current_status: ShipmentStatus
    progress: int
    sender: ContactInfo
    receiver: ContactInfo
    origin: LocationInfo
    destination: LocationInfo
    current_location: Optional[LocationInfo] = None
    history: List[HistoryEntry]
    created_at: UtcDatetime
    updated_at: UtcDatetime


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total_pages: int


class ShipmentListResponse(CamelModel):
    """Schema for paginated shipment list."""
    success: bool = True
    count: int
    total: int
    pagination: PaginationMeta
    data: List[ShipmentResponse]


class TrackingIdResponse(CamelModel):
    tracking_id: str


class DashboardStats(CamelModel):
    total_trackings: int
    active_trackings: int
    delivered_trackings: int
    arriving_today: int
    status_stats: Dict[str, int]
    recent_trackings: List[ShipmentResponse]
