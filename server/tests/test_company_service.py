# server/tests/test_company_service.py
"""
Company service tests - tenants and user membership

Run with: pytest tests/test_company_service.py -v
"""
import pytest

from services.company_service import CompanyService
from utils.exceptions import ValidationError, NotFoundError, ForbiddenError


# ==================== COMPANIES ====================

class TestCompanies:
    """Create, read and update companies"""

    def test_create_and_get(self):
        created = CompanyService.create_company({
            "name": "  Taxis Capital  ",
            "contact_email": "ops@taxiscapital.com",
            "settings": {"fare_multiplier": 1.2, "dispatch_mode": "manual"},
        })

        assert created.id
        assert created.name == "Taxis Capital"
        assert created.primary_color == "#FF5500"
        assert created.active is True

        fetched = CompanyService.get_company(created.id)
        assert fetched.name == "Taxis Capital"
        assert fetched.contact_email == "ops@taxiscapital.com"
        assert fetched.settings.dispatch_mode == "manual"

    def test_explicit_id(self):
        created = CompanyService.create_company({"name": "Default"}, company_id="default_company")
        assert created.id == "default_company"

    def test_name_too_short(self):
        with pytest.raises(ValidationError):
            CompanyService.create_company({"name": "X"})

    def test_invalid_color(self):
        with pytest.raises(ValidationError):
            CompanyService.create_company({"name": "Colores", "primary_color": "orange"})

    def test_missing_company_is_none(self):
        assert CompanyService.get_company("nope") is None

    def test_update(self, companies):
        updated = CompanyService.update_company("company_a", {"active": False, "primary_color": "#abcdef"})
        assert updated.active is False
        assert updated.primary_color == "#ABCDEF"
        assert updated.name == "Taxis del Norte"

    def test_update_missing(self):
        with pytest.raises(NotFoundError):
            CompanyService.update_company("ghost", {"name": "Ghost Cabs"})

    def test_active_vs_all(self, companies):
        CompanyService.update_company("company_b", {"active": False})

        active_ids = [c.id for c in CompanyService.get_active_companies()]
        all_ids = [c.id for c in CompanyService.get_all_companies("superadmin")]

        assert active_ids == ["company_a"]
        assert set(all_ids) == {"company_a", "company_b"}

    @pytest.mark.parametrize("role", ["admin", "driver"])
    def test_all_companies_requires_superadmin(self, companies, role):
        with pytest.raises(ForbiddenError):
            CompanyService.get_all_companies(role)


# ==================== MEMBERSHIP ====================

class TestMembership:
    """User-to-company association"""

    def test_assign_and_remove(self, companies, make_user):
        user = make_user("admin")
        assert CompanyService.assign_user_to_company(user.id, "company_a").company_id == "company_a"
        assert CompanyService.remove_user_from_company(user.id).company_id is None

    def test_remove_checks_membership(self, companies, make_user):
        driver = make_user("driver", company_id="company_b")

        with pytest.raises(NotFoundError):
            CompanyService.remove_user_from_company(driver.id, "company_a")
        assert CompanyService.get_user_companies(driver.id)[0].id == "company_b"

        assert CompanyService.remove_user_from_company(driver.id, "company_b").company_id is None

    def test_assign_missing_user(self, companies):
        with pytest.raises(NotFoundError):
            CompanyService.assign_user_to_company("ghost", "company_a")

    def test_superadmin_access_has_no_duplicates(self, companies, make_user):
        admin = make_user("superadmin", companies_access=["company_a"])

        CompanyService.add_company_access_for_superadmin(admin.id, "company_b")
        result = CompanyService.add_company_access_for_superadmin(admin.id, "company_b")
        assert result.companies_access == ["company_a", "company_b"]

        result = CompanyService.remove_company_access_for_superadmin(admin.id, "company_a")
        assert result.companies_access == ["company_b"]

    def test_access_list_is_superadmin_only(self, companies, make_user):
        admin = make_user("admin", company_id="company_a")
        with pytest.raises(ForbiddenError):
            CompanyService.add_company_access_for_superadmin(admin.id, "company_b")
        with pytest.raises(ForbiddenError):
            CompanyService.remove_company_access_for_superadmin(admin.id, "company_a")

    def test_transfer_keeps_previous_access_for_superadmin(self, companies, make_user):
        admin = make_user("superadmin", company_id="company_a", companies_access=["company_a"])

        moved = CompanyService.transfer_user_between_companies(
            admin.id, "company_b", keep_access_to_previous_company=True
        )

        assert moved.company_id == "company_b"
        assert moved.companies_access == ["company_a", "company_b"]

    def test_transfer_ignores_keep_flag_for_admins(self, companies, make_user):
        admin = make_user("admin", company_id="company_a")

        moved = CompanyService.transfer_user_between_companies(
            admin.id, "company_b", keep_access_to_previous_company=True
        )

        assert moved.company_id == "company_b"
        assert moved.companies_access is None

    def test_demoted_superadmin_keeps_previous_access(self, companies, make_user):
        superadmin = make_user("superadmin", company_id="company_a", companies_access=["company_a"])

        moved = CompanyService.transfer_user_between_companies(
            superadmin.id, "company_b", new_role="admin", keep_access_to_previous_company=True
        )

        assert moved.role == "admin"
        assert moved.companies_access == ["company_a", "company_b"]

    def test_promoted_admin_gets_no_access_list(self, companies, make_user):
        admin = make_user("admin", company_id="company_a")

        moved = CompanyService.transfer_user_between_companies(
            admin.id, "company_b", new_role="superadmin", keep_access_to_previous_company=True
        )

        assert moved.role == "superadmin"
        assert moved.companies_access is None

    def test_transfer_with_role_change(self, companies, make_user):
        driver = make_user("driver", company_id="company_a")
        moved = CompanyService.transfer_user_between_companies(driver.id, "company_b", new_role="admin")
        assert moved.role == "admin"

    def test_users_by_company(self, companies, make_user):
        active = make_user("driver", company_id="company_a")
        suspended = make_user("driver", company_id="company_a", status="suspended")
        make_user("admin", company_id="company_a")
        make_user("driver", company_id="company_b")

        drivers = CompanyService.get_users_by_company("company_a", role="driver")
        assert [u.id for u in drivers] == [active.id]

        everyone = CompanyService.get_users_by_company("company_a", include_inactive=True)
        assert len(everyone) == 3

        only_suspended = CompanyService.get_users_by_company("company_a", status="suspended")
        assert [u.id for u in only_suspended] == [suspended.id]

        assert len(CompanyService.get_users_by_company("company_a", include_inactive=True, limit=2)) == 2

    def test_user_companies(self, companies, make_user):
        superadmin = make_user("superadmin", companies_access=["company_b", "missing", "company_a"])
        admin = make_user("admin", company_id="company_a")
        loner = make_user("driver")

        assert [c.id for c in CompanyService.get_user_companies(superadmin.id)] == ["company_b", "company_a"]
        assert [c.id for c in CompanyService.get_user_companies(admin.id)] == ["company_a"]
        assert CompanyService.get_user_companies(loner.id) == []
        assert CompanyService.get_user_companies("ghost") == []
