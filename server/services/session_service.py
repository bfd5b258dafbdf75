# server/services/session_service.py
"""
Authorization session - role and tenant resolution for a signed-in identity.

A session is built once per request from the stored user row. Role/tenant
derivation is a pure function of that row (resolve_role_state); reads that
fail degrade to the driver role with no tenant instead of surfacing an error.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from core.config import DEFAULT_ROLE, DEFAULT_USER_STATUS, MAX_COMPANIES_ACCESS
from core.database import SessionLocal, User, Company
from schemas.company import CompanyRecord
from schemas.user import UserRecord
from services.database_helpers import to_record
from services.rbac_service import RBACService
from utils.datetime_utils import get_utc_now
from utils.exceptions import (
    RideNowException, ValidationError, ForbiddenError, CompanyAccessError, NotFoundError
)
from core.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RoleState:
    """Role and tenant derived from a user record"""
    role: Optional[str]
    company_id: Optional[str]
    companies: List[CompanyRecord] = field(default_factory=list)


@dataclass
class AuthSession:
    """Resolved authorization context for one signed-in identity"""
    user: Optional[UserRecord] = None
    loading: bool = False
    role: Optional[str] = None
    company_id: Optional[str] = None
    company: Optional[CompanyRecord] = None
    companies: List[CompanyRecord] = field(default_factory=list)

    @property
    def uid(self) -> Optional[str]:
        return self.user.id if self.user else None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def has_permission(self, permission: str) -> bool:
        return RBACService.has_permission(self.role, permission)

    @property
    def is_admin(self) -> bool:
        return RBACService.is_admin(self.role)

    @property
    def is_super_admin(self) -> bool:
        return RBACService.is_super_admin(self.role)

    @property
    def is_driver(self) -> bool:
        return RBACService.is_driver(self.role)

    def get_dashboard_path(self) -> str:
        return RBACService.get_dashboard_path(self.role)

    def can_access_company(self, company_id: Optional[str]) -> bool:
        """Superadmins reach any company; everyone else only their own."""
        if not company_id or not self.user:
            return False
        if self.is_super_admin:
            return True
        return company_id == self.company_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user,
            "loading": self.loading,
            "role": self.role,
            "company_id": self.company_id,
            "company": self.company,
            "companies": self.companies,
            "permissions": [p.value for p in RBACService.get_permissions(self.role)],
            "is_admin": self.is_admin,
            "is_super_admin": self.is_super_admin,
            "is_driver": self.is_driver,
            "dashboard_path": self.get_dashboard_path(),
        }


def resolve_role_state(user: Optional[UserRecord], companies: Optional[List[CompanyRecord]] = None) -> RoleState:
    """
    Derive role and active tenant from a fetched user record.

    Args:
        user: Stored user record (None for a user that could not be read)
        companies: Resolved companies_access records (superadmins only)

    Returns:
        RoleState. A missing role falls back to driver. For superadmins the
        active tenant is selected_company_id when it is among the resolved
        companies, then company_id, then the first resolved company.
    """
    if user is None:
        return RoleState(role=DEFAULT_ROLE, company_id=None)

    role = user.role or DEFAULT_ROLE
    if role != "superadmin":
        return RoleState(role=role, company_id=user.company_id)

    companies = list(companies or [])
    reachable = {c.id for c in companies}

    if user.selected_company_id and user.selected_company_id in reachable:
        company_id = user.selected_company_id
    elif user.company_id:
        company_id = user.company_id
    elif companies:
        company_id = companies[0].id
    else:
        company_id = None

    return RoleState(role=role, company_id=company_id, companies=companies)


class SessionService:
    """Builds and mutates authorization sessions"""

    @staticmethod
    def resolve_session(uid: str, identity: Optional[Dict[str, Any]] = None) -> AuthSession:
        """
        Build the session for an identity.

        A missing user row is created with the default role and status. Any
        read failure degrades to the driver role with no tenant.

        Args:
            uid: Identity uid
            identity: Identity fields used when creating the row (email,
                display_name, photo_url, phone_number)
        """
        identity = identity or {}
        db = SessionLocal()
        try:
            user = db.get(User, uid)

            if not user:
                now = get_utc_now()
                user = User(
                    id=uid,
                    email=identity.get("email"),
                    display_name=identity.get("display_name"),
                    photo_url=identity.get("photo_url"),
                    phone_number=identity.get("phone_number"),
                    role=DEFAULT_ROLE,
                    status=DEFAULT_USER_STATUS,
                    created_at=now,
                    last_login=now,
                )
                db.add(user)
                db.commit()
                db.refresh(user)
                logger.info(f"✓ User document created with default role: {uid}")

            record = to_record(UserRecord, user, "user")

            companies = []
            if record.role == "superadmin" and record.companies_access:
                for company_id in record.companies_access[:MAX_COMPANIES_ACCESS]:
                    company = db.get(Company, company_id)
                    if company:
                        companies.append(to_record(CompanyRecord, company, "company"))

            state = resolve_role_state(record, companies)

            company = None
            if state.company_id:
                company = next((c for c in companies if c.id == state.company_id), None)
                if company is None:
                    row = db.get(Company, state.company_id)
                    company = to_record(CompanyRecord, row, "company") if row else None

            return AuthSession(
                user=record,
                role=state.role,
                company_id=state.company_id,
                company=company,
                companies=state.companies,
            )

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to resolve session for {uid}, falling back to driver: {e}")
            return AuthSession(
                user=UserRecord(id=uid, email=identity.get("email"), role=DEFAULT_ROLE),
                role=DEFAULT_ROLE,
            )
        finally:
            db.close()

    @staticmethod
    def stamp_last_login(uid: str) -> None:
        """
        Record the last-login time. Runs as a background task after the
        response; failures are logged and never reach the caller.
        """
        db = SessionLocal()
        try:
            user = db.get(User, uid)
            if not user:
                logger.warning(f"Last-login stamp skipped, user not found: {uid}")
                return
            user.last_login = get_utc_now()
            db.commit()
        except Exception as e:
            db.rollback()
            logger.warning(f"Failed to stamp last login for {uid}: {e}")
        finally:
            db.close()

    @staticmethod
    def set_current_company(session: AuthSession, company_id: str) -> AuthSession:
        """
        Switch a superadmin's active company. The choice is persisted on the
        user row (last write wins).

        Raises:
            ForbiddenError: If the session is not a superadmin
            CompanyAccessError: If the company is not among the session's companies
            NotFoundError: If the company no longer exists
        """
        if not session.is_super_admin:
            raise ForbiddenError("Only superadmins can switch companies")
        if company_id not in {c.id for c in session.companies}:
            raise CompanyAccessError(company_id)

        db = SessionLocal()
        try:
            company = db.get(Company, company_id)
            if not company:
                raise NotFoundError("Company", company_id)
            record = to_record(CompanyRecord, company, "company")

            user = db.get(User, session.uid)
            if user:
                user.selected_company_id = company_id
                db.commit()

            logger.info(f"✓ Superadmin {session.uid} switched to company {company_id}")
            return replace(session, company_id=company_id, company=record)

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to switch company for {session.uid}: {e}")
            raise ValidationError(f"Failed to switch company: {str(e)}")
        finally:
            db.close()
