from enum import Enum
from typing import List, Optional


class Permission(str, Enum):
    """All permissions in the system."""
    # Ride permissions
    VIEW_OWN_RIDES = "view_own_rides"
    VIEW_ALL_RIDES = "view_all_rides"
    ACCEPT_RIDES = "accept_rides"
    COMPLETE_RIDES = "complete_rides"

    # Driver self-service
    UPDATE_OWN_STATUS = "update_own_status"
    UPDATE_OWN_LOCATION = "update_own_location"

    # Administration
    MANAGE_DRIVERS = "manage_drivers"
    VIEW_STATS = "view_stats"
    MANAGE_REGIONS = "manage_regions"

    # Platform
    MANAGE_ADMINS = "manage_admins"
    CONFIGURE_SYSTEM = "configure_system"
    MANAGE_ROLES = "manage_roles"


def _role_key(role) -> Optional[str]:
    """Accept UserRole members as well as plain strings."""
    return getattr(role, "value", role)


class RBACService:
    """Role-based access control."""

    # Permission matrix: role -> list of permissions
    ROLE_PERMISSIONS = {
        "driver": [
            Permission.VIEW_OWN_RIDES,
            Permission.UPDATE_OWN_STATUS,
            Permission.UPDATE_OWN_LOCATION,
            Permission.ACCEPT_RIDES,
            Permission.COMPLETE_RIDES,
        ],
        "admin": [
            Permission.VIEW_ALL_RIDES,
            Permission.MANAGE_DRIVERS,
            Permission.VIEW_STATS,
            Permission.MANAGE_REGIONS,
            Permission.VIEW_OWN_RIDES,
            Permission.UPDATE_OWN_STATUS,
            Permission.UPDATE_OWN_LOCATION,
        ],
        "superadmin": [
            Permission.VIEW_ALL_RIDES,
            Permission.MANAGE_DRIVERS,
            Permission.VIEW_STATS,
            Permission.MANAGE_REGIONS,
            Permission.MANAGE_ADMINS,
            Permission.CONFIGURE_SYSTEM,
            Permission.MANAGE_ROLES,
            Permission.VIEW_OWN_RIDES,
            Permission.UPDATE_OWN_STATUS,
            Permission.UPDATE_OWN_LOCATION,
        ],
    }

    # Display data used when seeding the role table
    ROLE_DEFINITIONS = {
        "superadmin": ("Super Administrador", "Administrador con acceso total al sistema", 3),
        "admin": ("Administrador", "Administrador con acceso a gestión de conductores y estadísticas", 2),
        "driver": ("Conductor", "Conductor que ofrece servicios de transporte", 1),
    }

    DASHBOARD_PATHS = {
        "superadmin": "/dashboard/superadmin",
        "admin": "/dashboard/admin",
        "driver": "/dashboard/driver",
    }

    @staticmethod
    def has_permission(role: Optional[str], permission: str) -> bool:
        """Check if role has permission. Unknown and empty roles have none."""
        role = _role_key(role)
        if not role:
            return False
        permissions = RBACService.ROLE_PERMISSIONS.get(role, [])
        return permission in permissions

    @staticmethod
    def get_permissions(role: Optional[str]) -> List[Permission]:
        """Get all permissions for a role."""
        role = _role_key(role)
        return list(RBACService.ROLE_PERMISSIONS.get(role, [])) if role else []

    @staticmethod
    def require_permission(role: Optional[str], permission: str) -> bool:
        """Enforce permission (raises exception if not allowed)."""
        if not RBACService.has_permission(role, permission):
            from utils.exceptions import ForbiddenError
            raise ForbiddenError(f"Missing permission: {permission}")
        return True

    @staticmethod
    def is_admin(role: Optional[str]) -> bool:
        """Superadmins count as admins."""
        return _role_key(role) in ("admin", "superadmin")

    @staticmethod
    def is_super_admin(role: Optional[str]) -> bool:
        return _role_key(role) == "superadmin"

    @staticmethod
    def is_driver(role: Optional[str]) -> bool:
        return _role_key(role) == "driver"

    @staticmethod
    def get_dashboard_path(role: Optional[str]) -> str:
        """Default landing page for a role."""
        return RBACService.DASHBOARD_PATHS.get(_role_key(role), "/dashboard")
