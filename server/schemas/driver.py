from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
import enum


class DriverStatus(str, enum.Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"
    RESTING = "resting"


class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    last_updated: Optional[datetime] = None


class Vehicle(BaseModel):
    make: str
    model: str
    year: int
    color: str
    plate: str
    photo: Optional[str] = None


class DriverDocument(BaseModel):
    number: str
    expiry_date: str
    verified: bool = False
    photo_url: Optional[str] = None


class DriverDocuments(BaseModel):
    license: Optional[DriverDocument] = None
    insurance: Optional[DriverDocument] = None


class Earnings(BaseModel):
    total: float = 0
    pending_payout: float = 0
    last_payout: Optional[datetime] = None


class DriverRecord(BaseModel):
    """Driver document as stored under its company."""
    id: str
    company_id: Optional[str] = None
    user_id: Optional[str] = None
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: DriverStatus
    rating: Optional[float] = None
    completed_rides: int = 0
    location: Optional[Location] = None
    vehicle: Optional[Vehicle] = None
    documents: Optional[DriverDocuments] = None
    assigned_ride_id: Optional[str] = None
    earnings: Optional[Earnings] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class CreateDriverRequest(BaseModel):
    user_id: Optional[str] = None
    full_name: str = Field(..., min_length=2, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    status: DriverStatus = DriverStatus.OFFLINE
    rating: Optional[float] = Field(None, ge=0, le=5)
    completed_rides: int = 0
    vehicle: Optional[Vehicle] = None
    documents: Optional[DriverDocuments] = None


class UpdateDriverRequest(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    completed_rides: Optional[int] = None
    vehicle: Optional[Vehicle] = None
    documents: Optional[DriverDocuments] = None
    assigned_ride_id: Optional[str] = None
    earnings: Optional[Earnings] = None


class UpdateDriverStatusRequest(BaseModel):
    status: DriverStatus


class UpdateLocationRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
