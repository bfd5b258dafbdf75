# server/tests/conftest.py
"""
Shared fixtures.

The environment is set before any application module is imported so the
engine binds to a throwaway SQLite file and password hashing stays fast.
"""
import os
import tempfile
from uuid import uuid4

_TEST_DB_DIR = tempfile.mkdtemp(prefix="ridenow-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'ridenow_test.db')}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["BOOTSTRAP_SECRET_KEY"] = "test-bootstrap-secret"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from core.database import init_db, drop_all_tables
from services.auth_service import AuthService
from services.company_service import CompanyService
from services.role_service import RoleService


@pytest.fixture(autouse=True)
def fresh_database():
    """Every test starts from empty tables plus the built-in roles"""
    drop_all_tables()
    init_db()
    RoleService.seed_roles()
    yield


@pytest.fixture
def companies():
    """Two tenants: company_a and company_b"""
    return {
        "a": CompanyService.create_company({"name": "Taxis del Norte"}, company_id="company_a"),
        "b": CompanyService.create_company({"name": "Ride Sur", "primary_color": "#00aa55"}, company_id="company_b"),
    }


@pytest.fixture
def make_user():
    """Factory creating a stored user with a role"""
    def _make(role="driver", company_id=None, companies_access=None, uid=None, **extra):
        uid = uid or f"{role}-{uuid4().hex[:8]}"
        extra.setdefault("email", f"{uid}@ridenow.com")
        return RoleService.assign_user_role(
            uid, role, company_id=company_id, companies_access=companies_access, **extra
        )
    return _make


@pytest.fixture
def auth_headers():
    """Bearer header for a stored user record"""
    def _headers(user):
        token = AuthService.create_jwt_token(user.id, user.email, user.role, user.company_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def client():
    """Test client running the app lifecycle (startup creates tables and roles)"""
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as test_client:
        yield test_client
