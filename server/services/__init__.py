from .auth_service import AuthService
from .company_service import CompanyService
from .driver_service import DriverService
from .ride_service import RideService
from .role_service import RoleService
from .session_service import SessionService, AuthSession

__all__ = [
    "AuthService",
    "CompanyService",
    "DriverService",
    "RideService",
    "RoleService",
    "SessionService",
    "AuthSession",
]
