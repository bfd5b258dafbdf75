# server/tests/test_rbac.py
"""
Permission table and role checks

Run with: pytest tests/test_rbac.py -v
"""
import pytest

from schemas.user import UserRole
from services.rbac_service import RBACService, Permission
from utils.exceptions import ForbiddenError


class TestPermissionTable:
    """Static role -> permission matrix"""

    @pytest.mark.parametrize("role,permission", [
        ("driver", Permission.VIEW_OWN_RIDES),
        ("driver", Permission.ACCEPT_RIDES),
        ("admin", Permission.MANAGE_DRIVERS),
        ("admin", Permission.VIEW_STATS),
        ("superadmin", Permission.MANAGE_ROLES),
        ("superadmin", Permission.CONFIGURE_SYSTEM),
    ])
    def test_granted(self, role, permission):
        assert RBACService.has_permission(role, permission)

    @pytest.mark.parametrize("role,permission", [
        ("driver", Permission.MANAGE_DRIVERS),
        ("driver", Permission.VIEW_ALL_RIDES),
        ("admin", Permission.MANAGE_ADMINS),
        ("admin", Permission.ACCEPT_RIDES),
        ("superadmin", Permission.ACCEPT_RIDES),
    ])
    def test_denied(self, role, permission):
        assert not RBACService.has_permission(role, permission)

    def test_unknown_and_empty_roles_have_nothing(self):
        assert not RBACService.has_permission(None, Permission.VIEW_OWN_RIDES)
        assert not RBACService.has_permission("", Permission.VIEW_OWN_RIDES)
        assert not RBACService.has_permission("dispatcher", Permission.VIEW_OWN_RIDES)
        assert RBACService.get_permissions(None) == []

    def test_plain_strings_and_enum_members_match(self):
        """Permission names arrive as strings from the role table and URLs"""
        assert RBACService.has_permission("admin", "manage_drivers")
        assert RBACService.has_permission(UserRole.ADMIN, Permission.MANAGE_DRIVERS)

    def test_require_permission_raises(self):
        with pytest.raises(ForbiddenError):
            RBACService.require_permission("driver", Permission.MANAGE_DRIVERS)
        assert RBACService.require_permission("admin", Permission.MANAGE_DRIVERS)


class TestRoleHelpers:
    """Role predicates and dashboard landing pages"""

    def test_superadmin_counts_as_admin(self):
        assert RBACService.is_admin("superadmin")
        assert RBACService.is_admin("admin")
        assert not RBACService.is_admin("driver")

    def test_role_predicates(self):
        assert RBACService.is_super_admin(UserRole.SUPERADMIN)
        assert not RBACService.is_super_admin("admin")
        assert RBACService.is_driver("driver")

    @pytest.mark.parametrize("role,path", [
        ("superadmin", "/dashboard/superadmin"),
        ("admin", "/dashboard/admin"),
        ("driver", "/dashboard/driver"),
        (None, "/dashboard"),
        ("unknown", "/dashboard"),
    ])
    def test_dashboard_paths(self, role, path):
        assert RBACService.get_dashboard_path(role) == path
