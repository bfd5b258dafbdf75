from pydantic import BaseModel, Field, EmailStr
from datetime import datetime
from typing import Optional, Literal


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None


class CompanySettings(BaseModel):
    """Per-tenant fare and dispatch settings."""
    fare_multiplier: Optional[float] = None
    minimum_fare: Optional[float] = None
    commission_percentage: Optional[float] = Field(None, ge=0, le=100)
    allowed_payment_methods: Optional[list[str]] = None
    dispatch_mode: Optional[Literal["automatic", "manual"]] = None


class OperationArea(BaseModel):
    name: str
    coordinates: Optional[dict] = None


class CompanyRecord(BaseModel):
    """Company (tenant) as stored."""
    id: str
    name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    address: Optional[Address] = None
    settings: Optional[CompanySettings] = None
    operation_areas: Optional[list[OperationArea]] = None
    active: bool
    subscription_plan: Optional[str] = None
    subscription_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CreateCompanyRequest(BaseModel):
    """Create company request."""
    name: str = Field(..., min_length=2, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: str = Field("#FF5500", pattern="^#[0-9A-Fa-f]{6}$")
    address: Optional[Address] = None
    settings: Optional[CompanySettings] = None
    operation_areas: Optional[list[OperationArea]] = None
    active: bool = True
    subscription_plan: Optional[str] = None


class UpdateCompanyRequest(BaseModel):
    """Partial company update."""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = Field(None, pattern="^#[0-9A-Fa-f]{6}$")
    address: Optional[Address] = None
    settings: Optional[CompanySettings] = None
    operation_areas: Optional[list[OperationArea]] = None
    active: Optional[bool] = None
    subscription_plan: Optional[str] = None
