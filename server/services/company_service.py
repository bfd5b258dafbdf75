# server/services/company_service.py
"""Company (tenant) management and user-to-company association"""
from typing import Dict, Any, Optional, List

from core.database import SessionLocal, Company, User
from core.config import DEFAULT_PRIMARY_COLOR
from schemas.company import CompanyRecord
from schemas.user import UserRecord
from services.database_helpers import to_record, to_json, dedupe, apply_updates
from utils.exceptions import RideNowException, ValidationError, NotFoundError, ForbiddenError
from utils.validators import validate_hex_color
from core.logger import get_logger

logger = get_logger(__name__)

COMPANY_FIELDS = {
    "name", "contact_email", "contact_phone", "logo_url", "primary_color",
    "address", "settings", "operation_areas", "active", "subscription_plan",
    "subscription_expires_at",
}


class CompanyService:
    """Service for managing companies and tenant membership"""

    @staticmethod
    def create_company(company_data: Dict[str, Any], company_id: Optional[str] = None) -> CompanyRecord:
        """
        Create a new company.

        Args:
            company_data: Company fields (name required)
            company_id: Explicit id; generated when omitted

        Returns:
            The stored company; its id is the generated document id

        Raises:
            ValidationError: If validation fails
        """
        db = SessionLocal()
        try:
            name = (company_data.get("name") or "").strip()
            if len(name) < 2:
                raise ValidationError("Company name must be at least 2 characters")

            fields = {k: to_json(v) for k, v in company_data.items() if k in COMPANY_FIELDS}
            fields["name"] = name
            fields["primary_color"] = validate_hex_color(fields.get("primary_color") or DEFAULT_PRIMARY_COLOR)
            fields.setdefault("active", True)

            company = Company(**fields)
            if company_id:
                company.id = company_id
            db.add(company)
            db.commit()
            db.refresh(company)

            logger.info(f"✓ Company created: {name} ({company.id})")
            return to_record(CompanyRecord, company, "company")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create company: {e}")
            raise ValidationError(f"Failed to create company: {str(e)}")
        finally:
            db.close()

    @staticmethod
    def get_company(company_id: str) -> Optional[CompanyRecord]:
        """Get company by id, or None when it does not exist."""
        db = SessionLocal()
        try:
            company = db.get(Company, company_id)
            if not company:
                return None
            return to_record(CompanyRecord, company, "company")
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get company {company_id}: {e}")
            raise ValidationError("Failed to retrieve company")
        finally:
            db.close()

    @staticmethod
    def update_company(company_id: str, company_data: Dict[str, Any]) -> CompanyRecord:
        """
        Update company fields; updated_at is always refreshed.

        Raises:
            NotFoundError: If the company does not exist
        """
        db = SessionLocal()
        try:
            company = db.get(Company, company_id)
            if not company:
                raise NotFoundError("Company", company_id)

            updates = dict(company_data)
            if updates.get("name") is not None:
                updates["name"] = updates["name"].strip()
                if len(updates["name"]) < 2:
                    raise ValidationError("Company name must be at least 2 characters")
            if updates.get("primary_color") is not None:
                updates["primary_color"] = validate_hex_color(updates["primary_color"])

            changed = apply_updates(company, updates, COMPANY_FIELDS)
            db.commit()
            db.refresh(company)

            logger.info(f"✓ Company updated: {company_id} ({', '.join(changed) or 'timestamp only'})")
            return to_record(CompanyRecord, company, "company")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update company {company_id}: {e}")
            raise ValidationError(f"Failed to update company: {str(e)}")
        finally:
            db.close()

    @staticmethod
    def get_active_companies() -> List[CompanyRecord]:
        """Companies with active=True."""
        db = SessionLocal()
        try:
            companies = db.query(Company).filter(Company.active.is_(True)).order_by(Company.name).all()
            return [to_record(CompanyRecord, c, "company") for c in companies]
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get active companies: {e}")
            raise ValidationError("Failed to retrieve companies")
        finally:
            db.close()

    @staticmethod
    def get_all_companies(current_user_role: Optional[str] = None) -> List[CompanyRecord]:
        """
        Get every company, inactive ones included.

        Args:
            current_user_role: Caller's role; when given it must be superadmin

        Raises:
            ForbiddenError: If a non-superadmin role asks for the full list
        """
        role = getattr(current_user_role, "value", current_user_role)
        if role and role != "superadmin":
            logger.error(f"Permission denied: role {role} cannot list all companies")
            raise ForbiddenError("Only superadmins can list all companies")

        db = SessionLocal()
        try:
            companies = db.query(Company).order_by(Company.created_at.desc()).all()
            return [to_record(CompanyRecord, c, "company") for c in companies]
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get all companies: {e}")
            raise ValidationError("Failed to retrieve companies")
        finally:
            db.close()

    @staticmethod
    def get_user_companies(user_id: str) -> List[CompanyRecord]:
        """
        Companies a user can reach: the companies_access list for superadmins,
        otherwise the single company_id. Missing companies are skipped.
        """
        db = SessionLocal()
        try:
            user = db.get(User, user_id)
            if not user:
                return []

            if user.role == "superadmin" and isinstance(user.companies_access, list):
                company_ids = list(user.companies_access)
            elif user.company_id:
                company_ids = [user.company_id]
            else:
                return []

            companies = []
            for company_id in company_ids:
                company = db.get(Company, company_id)
                if company:
                    companies.append(to_record(CompanyRecord, company, "company"))
            return companies

        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get companies for user {user_id}: {e}")
            raise ValidationError("Failed to retrieve user companies")
        finally:
            db.close()

    @staticmethod
    def assign_user_to_company(user_id: str, company_id: str) -> UserRecord:
        """Set a user's company_id."""
        return CompanyService._update_user(
            user_id, "assign user to company", lambda user: setattr(user, "company_id", company_id)
        )

    @staticmethod
    def remove_user_from_company(user_id: str, company_id: Optional[str] = None) -> UserRecord:
        """
        Clear a user's company_id.

        When company_id is given the user must currently belong to it.

        Raises:
            NotFoundError: If the user does not exist or is not a member of company_id
        """
        def detach(user: User):
            if company_id is not None and user.company_id != company_id:
                raise NotFoundError("User", f"{user_id} in company {company_id}")
            user.company_id = None

        return CompanyService._update_user(user_id, "remove user from company", detach)

    @staticmethod
    def add_company_access_for_superadmin(user_id: str, company_id: str) -> UserRecord:
        """
        Grant a superadmin access to one more company (no duplicates).

        Raises:
            ForbiddenError: If the user is not a superadmin
        """
        def add_access(user: User):
            if user.role != "superadmin":
                raise ForbiddenError("Only superadmins can be granted access to multiple companies")
            current = user.companies_access if isinstance(user.companies_access, list) else []
            user.companies_access = dedupe(current + [company_id])

        return CompanyService._update_user(user_id, "add company access", add_access)

    @staticmethod
    def remove_company_access_for_superadmin(user_id: str, company_id: str) -> UserRecord:
        """
        Revoke a superadmin's access to a company.

        Raises:
            ForbiddenError: If the user is not a superadmin
        """
        def remove_access(user: User):
            if user.role != "superadmin":
                raise ForbiddenError("This operation is only applicable for superadmins")
            current = user.companies_access if isinstance(user.companies_access, list) else []
            user.companies_access = [cid for cid in current if cid != company_id]

        return CompanyService._update_user(user_id, "remove company access", remove_access)

    @staticmethod
    def transfer_user_between_companies(
        user_id: str,
        new_company_id: str,
        new_role: Optional[str] = None,
        keep_access_to_previous_company: bool = False
    ) -> UserRecord:
        """
        Move a user to another company.

        Superadmins asked to keep access to their previous company get both the
        previous and the new company merged into companies_access.

        Args:
            user_id: User to transfer
            new_company_id: Destination company
            new_role: Optional role change applied with the transfer
            keep_access_to_previous_company: Only honoured when the user was a
                superadmin before the transfer
        """
        def transfer(user: User):
            previous_company_id = user.company_id
            previous_role = user.role
            user.company_id = new_company_id

            if new_role:
                user.role = getattr(new_role, "value", new_role)

            if previous_role == "superadmin" and keep_access_to_previous_company and previous_company_id:
                current = user.companies_access if isinstance(user.companies_access, list) else []
                user.companies_access = dedupe(current + [previous_company_id, new_company_id])

        return CompanyService._update_user(user_id, "transfer user", transfer)

    @staticmethod
    def get_users_by_company(
        company_id: str,
        role: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        include_inactive: bool = False
    ) -> List[UserRecord]:
        """
        Users whose company_id matches. Only active users unless a status is
        given or include_inactive is set.
        """
        db = SessionLocal()
        try:
            query = db.query(User).filter(User.company_id == company_id)

            if role:
                query = query.filter(User.role == getattr(role, "value", role))
            if status:
                query = query.filter(User.status == getattr(status, "value", status))
            elif not include_inactive:
                query = query.filter(User.status == "active")

            query = query.order_by(User.created_at)
            if limit and limit > 0:
                query = query.limit(limit)

            return [to_record(UserRecord, u, "user") for u in query.all()]

        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get users for company {company_id}: {e}")
            raise ValidationError("Failed to retrieve company users")
        finally:
            db.close()

    @staticmethod
    def _update_user(user_id: str, action: str, mutate) -> UserRecord:
        """Load a user, apply mutate(user), commit and return the new record."""
        db = SessionLocal()
        try:
            user = db.get(User, user_id)
            if not user:
                raise NotFoundError("User", user_id)

            mutate(user)
            db.commit()
            db.refresh(user)

            logger.info(f"✓ {action.capitalize()}: {user_id}")
            return to_record(UserRecord, user, "user")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to {action} {user_id}: {e}")
            raise ValidationError(f"Failed to {action}: {str(e)}")
        finally:
            db.close()
