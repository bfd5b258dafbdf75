from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Literal, get_args
import enum


class RideStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    APP_CREDIT = "app_credit"


# Lifecycle timestamps that can be stamped after the ride was requested
RideTimestampField = Literal[
    "accepted",
    "pickup_arrival",
    "pickup_confirmed",
    "dropoff_arrival",
    "completed",
    "cancelled",
]
RIDE_TIMESTAMP_FIELDS = get_args(RideTimestampField)


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str
    name: Optional[str] = None


class RideRoute(BaseModel):
    distance: float  # km
    duration: float  # minutes
    polyline: Optional[str] = None
    waypoints: Optional[list[tuple[float, float]]] = None


class RideTimestamps(BaseModel):
    requested: Optional[datetime] = None
    accepted: Optional[datetime] = None
    pickup_arrival: Optional[datetime] = None
    pickup_confirmed: Optional[datetime] = None
    dropoff_arrival: Optional[datetime] = None
    completed: Optional[datetime] = None
    cancelled: Optional[datetime] = None


class Payment(BaseModel):
    """Fare breakdown."""
    method: PaymentMethod
    base_fare: float
    distance: float
    time: float
    surge: Optional[float] = None
    tax: Optional[float] = None
    tip: Optional[float] = None
    total: float
    currency: str = "DOP"
    status: Literal["pending", "completed", "refunded"] = "pending"


class Rating(BaseModel):
    rating: float = Field(..., ge=0, le=5)
    comment: Optional[str] = None
    timestamp: Optional[datetime] = None


class RideRatings(BaseModel):
    from_customer: Optional[Rating] = None
    from_driver: Optional[Rating] = None


class RideRecord(BaseModel):
    """Ride document as stored under its company."""
    id: str
    company_id: Optional[str] = None
    customer_id: str
    driver_id: Optional[str] = None
    status: RideStatus
    pickup: GeoPoint
    dropoff: GeoPoint
    route: Optional[RideRoute] = None
    timestamps: RideTimestamps
    payment: Optional[Payment] = None
    ratings: Optional[RideRatings] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class CreateRideRequest(BaseModel):
    customer_id: str = Field(..., min_length=1)
    driver_id: Optional[str] = None
    status: RideStatus = RideStatus.PENDING
    pickup: GeoPoint
    dropoff: GeoPoint
    route: Optional[RideRoute] = None
    timestamps: Optional[RideTimestamps] = None
    payment: Optional[Payment] = None


class UpdateRideRequest(BaseModel):
    driver_id: Optional[str] = None
    pickup: Optional[GeoPoint] = None
    dropoff: Optional[GeoPoint] = None
    route: Optional[RideRoute] = None
    payment: Optional[Payment] = None
    ratings: Optional[RideRatings] = None


class UpdateRideStatusRequest(BaseModel):
    status: RideStatus
    timestamp: Optional[RideTimestampField] = None
