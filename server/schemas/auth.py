from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from schemas.company import CompanyRecord
from schemas.user import UserRecord, UserRole


class RegisterRequest(BaseModel):
    """Account registration (admin/superadmin need the bootstrap secret)."""
    email: EmailStr
    password: str = Field(..., min_length=8)
    display_name: str = Field(..., min_length=2, max_length=255)
    phone_number: Optional[str] = None
    role: UserRole = UserRole.DRIVER
    company_id: Optional[str] = None
    secret_key: Optional[str] = None


class LoginRequest(BaseModel):
    """Login request."""
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Login response with bearer token and where the dashboard should land."""
    token: str
    token_type: str = "bearer"
    user: dict
    dashboard_path: str


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=8)


class SelectCompanyRequest(BaseModel):
    company_id: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Resolved authorization context."""
    user: Optional[UserRecord] = None
    loading: bool = False
    role: Optional[UserRole] = None
    company_id: Optional[str] = None
    company: Optional[CompanyRecord] = None
    companies: list[CompanyRecord] = []
    permissions: list[str] = []
    is_admin: bool = False
    is_super_admin: bool = False
    is_driver: bool = False
    dashboard_path: str = "/dashboard"

    class Config:
        use_enum_values = True
