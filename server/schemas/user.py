from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
import enum


class UserRole(str, enum.Enum):
    """User roles for RBAC."""
    DRIVER = "driver"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class UserMetadata(BaseModel):
    """Role-specific extras."""
    driver_id: Optional[str] = None
    license_verified: Optional[bool] = None
    documents_verified: Optional[bool] = None
    managed_regions: Optional[list[str]] = None


class UserRecord(BaseModel):
    """User document as stored (password hash never leaves the service layer)."""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    phone_number: Optional[str] = None
    role: Optional[UserRole] = None
    status: UserStatus = UserStatus.ACTIVE
    company_id: Optional[str] = None
    companies_access: Optional[list[str]] = None
    selected_company_id: Optional[str] = None
    user_metadata: Optional[UserMetadata] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class AssignRoleRequest(BaseModel):
    role: UserRole
    company_id: Optional[str] = None
    force_role_update: bool = False
    companies_access: Optional[list[str]] = None
    user_metadata: Optional[UserMetadata] = None


class UpdateUserStatusRequest(BaseModel):
    status: UserStatus


class AssignCompanyRequest(BaseModel):
    company_id: str = Field(..., min_length=1)


class TransferUserRequest(BaseModel):
    new_company_id: str = Field(..., min_length=1)
    new_role: Optional[UserRole] = None
    keep_access_to_previous_company: bool = False
