# server/tests/test_routes.py
"""
HTTP tests - guards, error bodies and the main flows through the API

Run with: pytest tests/test_routes.py -v
"""
import pytest

from services.driver_service import DriverService
from core.config import BOOTSTRAP_SECRET_KEY as BOOTSTRAP_SECRET


def _register(client, email, role="driver", **extra):
    payload = {
        "email": email,
        "password": "Ride2024now",
        "display_name": "Test Account",
        "role": role,
    }
    payload.update(extra)
    return client.post("/api/auth/register", json=payload)


# ==================== ERROR BODIES & GUARDS ====================

class TestGuards:
    """Anonymous, wrong-role and wrong-tenant requests"""

    def test_anonymous_is_sent_to_login(self, client):
        response = client.get("/api/auth/session")
        body = response.json()

        assert response.status_code == 401
        assert body["error"] == "UNAUTHORIZED"
        assert body["details"]["redirect_to"] == "/login"
        assert body["path"] == "/api/auth/session"

    def test_malformed_header(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Token abc"})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_wrong_role_gets_redirect(self, client, companies, make_user, auth_headers):
        driver = make_user("driver", company_id="company_a")
        response = client.get("/api/dashboard/admin", headers=auth_headers(driver))

        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"
        assert response.json()["details"]["redirect_to"] == "/"

    def test_missing_permission(self, client, companies, make_user, auth_headers):
        driver = make_user("driver", company_id="company_a")
        response = client.get("/api/companies/company_a/rides", headers=auth_headers(driver))

        assert response.status_code == 403
        assert response.json()["details"]["redirect_to"] == "/dashboard"

    def test_other_tenant(self, client, companies, make_user, auth_headers):
        admin = make_user("admin", company_id="company_a")
        response = client.get("/api/companies/company_b", headers=auth_headers(admin))

        assert response.status_code == 403
        assert response.json()["error"] == "COMPANY_MISMATCH"

    def test_suspended_account_loses_access(self, client, make_user, auth_headers):
        driver = make_user("driver", status="suspended")
        response = client.get("/api/users/me", headers=auth_headers(driver))

        assert response.status_code == 401
        assert response.json()["details"]["redirect_to"] == "/login"

    def test_unknown_route(self, client):
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"
        assert response.json()["message"] == "Page not found"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"
        assert client.get("/health").headers["X-Request-ID"]


# ==================== AUTH ====================

class TestAuthFlow:
    """Registration, login and the resolved session"""

    def test_register_and_login_driver(self, client):
        created = _register(client, "nuevo@ridenow.com")
        assert created.status_code == 201
        assert created.json()["role"] == "driver"
        assert "password_hash" not in created.json()

        login = client.post("/api/auth/login", json={"email": "nuevo@ridenow.com", "password": "Ride2024now"})
        assert login.status_code == 200
        assert login.json()["dashboard_path"] == "/dashboard/driver"

        headers = {"Authorization": f"Bearer {login.json()['token']}"}
        session = client.get("/api/auth/session", headers=headers).json()
        assert session["role"] == "driver"
        assert "view_own_rides" in session["permissions"]

    def test_privileged_roles_need_secret(self, client, companies):
        assert _register(client, "jefe@ridenow.com", role="admin").status_code == 403
        assert _register(client, "jefe@ridenow.com", role="admin", secret_key="wrong").status_code == 403

        created = _register(client, "jefe@ridenow.com", role="admin",
                            secret_key=BOOTSTRAP_SECRET, company_id="company_a")
        assert created.status_code == 201
        assert created.json()["company_id"] == "company_a"

    def test_duplicate_email(self, client):
        _register(client, "dup@ridenow.com")
        response = _register(client, "dup@ridenow.com")
        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    def test_bad_password(self, client):
        _register(client, "login@ridenow.com")
        response = client.post("/api/auth/login", json={"email": "login@ridenow.com", "password": "Wrong12345"})
        assert response.status_code == 401

    def test_inactive_account_cannot_login(self, client, make_user, auth_headers):
        created = _register(client, "parado@ridenow.com").json()
        superadmin = make_user("superadmin")
        client.put(f"/api/users/{created['id']}/status", json={"status": "suspended"},
                   headers=auth_headers(superadmin))

        response = client.post("/api/auth/login", json={"email": "parado@ridenow.com", "password": "Ride2024now"})
        assert response.status_code == 401

    def test_superadmin_switches_company(self, client, companies, make_user, auth_headers):
        superadmin = make_user("superadmin", companies_access=["company_a", "company_b"])
        headers = auth_headers(superadmin)

        session = client.get("/api/auth/session", headers=headers).json()
        assert session["company_id"] == "company_a"
        assert [c["id"] for c in session["companies"]] == ["company_a", "company_b"]

        switched = client.put("/api/auth/current-company", json={"company_id": "company_b"}, headers=headers)
        assert switched.status_code == 200
        assert switched.json()["company"]["name"] == "Ride Sur"

        assert client.get("/api/auth/session", headers=headers).json()["company_id"] == "company_b"

    def test_admin_cannot_switch_company(self, client, companies, make_user, auth_headers):
        admin = make_user("admin", company_id="company_a")
        response = client.put("/api/auth/current-company", json={"company_id": "company_b"},
                              headers=auth_headers(admin))
        assert response.status_code == 403


# ==================== COMPANIES, DRIVERS, RIDES ====================

class TestCompanyScopedRoutes:
    """Company, driver and ride endpoints"""

    def test_superadmin_creates_company(self, client, make_user, auth_headers):
        superadmin = make_user("superadmin")
        response = client.post("/api/companies", json={"name": "Taxis Este"}, headers=auth_headers(superadmin))

        assert response.status_code == 201
        assert response.json()["primary_color"] == "#FF5500"

    def test_remove_user_only_from_their_company(self, client, companies, make_user, auth_headers):
        headers = auth_headers(make_user("superadmin"))
        driver = make_user("driver", company_id="company_b")

        response = client.delete(f"/api/companies/company_a/users/{driver.id}", headers=headers)
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"
        assert client.get(f"/api/users/{driver.id}", headers=headers).json()["company_id"] == "company_b"

        response = client.delete(f"/api/companies/company_b/users/{driver.id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["company_id"] is None

    def test_admin_cannot_list_all_companies(self, client, companies, make_user, auth_headers):
        admin = make_user("admin", company_id="company_a")
        assert client.get("/api/companies", headers=auth_headers(admin)).status_code == 403

    def test_admin_manages_drivers(self, client, companies, make_user, auth_headers):
        headers = auth_headers(make_user("admin", company_id="company_a"))

        created = client.post("/api/companies/company_a/drivers", json={"full_name": "Pedro Gómez"}, headers=headers)
        assert created.status_code == 201
        assert created.json()["status"] == "offline"

        listed = client.get("/api/companies/company_a/drivers", headers=headers)
        assert [d["full_name"] for d in listed.json()] == ["Pedro Gómez"]

        assert client.post("/api/companies/company_b/drivers", json={"full_name": "Otro"},
                           headers=headers).status_code == 403

    def test_driver_updates_only_own_profile(self, client, companies, make_user, auth_headers):
        driver_user = make_user("driver", company_id="company_a")
        own = DriverService.create_driver_in_company("company_a", {"full_name": "Juan Pérez", "user_id": driver_user.id})
        other = DriverService.create_driver_in_company("company_a", {"full_name": "Ana Martínez"})
        headers = auth_headers(driver_user)

        response = client.put(f"/api/companies/company_a/drivers/{own.id}/status",
                              json={"status": "available"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["status"] == "available"

        response = client.put(f"/api/companies/company_a/drivers/{own.id}/location",
                              json={"lat": 18.48, "lng": -69.93}, headers=headers)
        assert response.json()["location"]["lat"] == 18.48

        response = client.put(f"/api/companies/company_a/drivers/{other.id}/status",
                              json={"status": "available"}, headers=headers)
        assert response.status_code == 403

        assert client.get("/api/companies/company_a/drivers/me", headers=headers).json()["id"] == own.id

    def test_ride_lifecycle(self, client, companies, make_user, auth_headers):
        admin_headers = auth_headers(make_user("admin", company_id="company_a"))
        driver_user = make_user("driver", company_id="company_a")
        driver = DriverService.create_driver_in_company("company_a", {"full_name": "Juan Pérez", "user_id": driver_user.id})

        ride = client.post("/api/companies/company_a/rides", json={
            "customer_id": "customer-1",
            "pickup": {"lat": 18.4861, "lng": -69.9312, "address": "Av. Winston Churchill"},
            "dropoff": {"lat": 18.4719, "lng": -69.9408, "address": "Av. Abraham Lincoln"},
        }, headers=admin_headers).json()
        assert ride["status"] == "pending"

        client.put(f"/api/companies/company_a/rides/{ride['id']}", json={"driver_id": driver.id}, headers=admin_headers)

        driver_headers = auth_headers(driver_user)
        mine = client.get("/api/companies/company_a/rides/mine", headers=driver_headers).json()
        assert [r["id"] for r in mine] == [ride["id"]]

        accepted = client.put(f"/api/companies/company_a/rides/{ride['id']}/status",
                              json={"status": "assigned", "timestamp": "accepted"}, headers=driver_headers)
        assert accepted.status_code == 200
        assert accepted.json()["timestamps"]["accepted"] is not None

        listed = client.get("/api/companies/company_a/rides", params={"status": ["assigned", "completed"]},
                            headers=admin_headers).json()
        assert [r["id"] for r in listed] == [ride["id"]]

    def test_bad_ride_ordering_is_400(self, client, companies, make_user, auth_headers):
        headers = auth_headers(make_user("admin", company_id="company_a"))
        response = client.get("/api/companies/company_a/rides", params={"order_by": "fare"}, headers=headers)
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"


# ==================== USERS, ROLES, DASHBOARDS ====================

class TestAdministration:
    """Users, roles and dashboard pages"""

    def test_superadmin_assigns_role(self, client, companies, make_user, auth_headers):
        headers = auth_headers(make_user("superadmin"))
        response = client.put("/api/users/new-admin/role",
                              json={"role": "admin", "company_id": "company_a"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert client.get("/api/users/new-admin", headers=headers).json()["company_id"] == "company_a"

    def test_users_see_only_themselves(self, client, make_user, auth_headers):
        driver = make_user("driver")
        other = make_user("driver")
        headers = auth_headers(driver)

        assert client.get("/api/users/me", headers=headers).json()["id"] == driver.id
        assert client.get(f"/api/users/{other.id}", headers=headers).status_code == 403

    def test_roles_table(self, client, make_user, auth_headers):
        superadmin = make_user("superadmin")
        make_user("driver")
        roles = client.get("/api/roles", headers=auth_headers(superadmin)).json()

        assert [r["id"] for r in roles] == ["superadmin", "admin", "driver"]
        counts = {r["id"]: r["users_count"] for r in roles}
        assert counts["superadmin"] == 1
        assert counts["driver"] == 1

    def test_revoked_permission_shows_in_stored_check(self, client, make_user, auth_headers):
        superadmin = make_user("superadmin")
        headers = auth_headers(superadmin)
        url = f"/api/users/{superadmin.id}/permissions/view_stats"

        assert client.get(url, headers=headers).json()["granted"] is True
        client.delete("/api/roles/superadmin/permissions/view_stats", headers=headers)
        assert client.get(url, headers=headers).json()["granted"] is False

    @pytest.mark.parametrize("path", ["/api/dashboard/superadmin", "/api/dashboard/superadmin/users"])
    def test_superadmin_pages_reject_admins(self, client, companies, make_user, auth_headers, path):
        admin = make_user("admin", company_id="company_a")
        assert client.get(path, headers=auth_headers(admin)).status_code == 403

    def test_admin_driver_page_filters(self, client, companies, make_user, auth_headers):
        headers = auth_headers(make_user("admin", company_id="company_a"))
        response = client.get("/api/dashboard/admin/drivers", params={"search": "juan", "status": "active"},
                              headers=headers)
        assert [d["id"] for d in response.json()["drivers"]] == ["driver_001"]

    def test_admin_stats_bad_period(self, client, companies, make_user, auth_headers):
        headers = auth_headers(make_user("admin", company_id="company_a"))
        assert client.get("/api/dashboard/admin/stats", params={"period": "year"},
                          headers=headers).status_code == 400

    def test_driver_map(self, client, companies, make_user, auth_headers):
        driver_user = make_user("driver", company_id="company_a")
        driver = DriverService.create_driver_in_company("company_a", {"full_name": "Juan Pérez"})
        DriverService.update_driver_location("company_a", driver.id, 18.48, -69.93)

        response = client.get("/api/dashboard/driver/map", headers=auth_headers(driver_user)).json()
        assert response["company_id"] == "company_a"
        assert [d["id"] for d in response["drivers"]] == [driver.id]

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["components"]["database"] == "up"

    def test_database_health(self, client):
        assert client.get("/health/db").json() == {"database": "up"}
