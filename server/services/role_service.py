# server/services/role_service.py
"""Role service - user role assignment and the stored role table"""
from typing import Dict, Any, Optional, List

from sqlalchemy import func

from core.database import SessionLocal, User, Role
from schemas.role import RoleRecord
from schemas.user import UserRecord
from services.database_helpers import to_record, to_json
from services.rbac_service import RBACService, Permission
from utils.datetime_utils import get_utc_now
from utils.exceptions import RideNowException, ValidationError, NotFoundError
from core.logger import get_logger

logger = get_logger(__name__)

# Profile fields that may ride along with a role assignment
USER_EXTRA_FIELDS = {"email", "display_name", "photo_url", "phone_number", "status"}


class RoleService:
    """Service for roles and user role data"""

    @staticmethod
    def assign_user_role(
        user_id: str,
        role: str,
        company_id: Optional[str] = None,
        force_role_update: bool = False,
        companies_access: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **extra
    ) -> UserRecord:
        """
        Assign a role to a user, creating the user row when missing.

        Existing users keep their role unless force_role_update is set; their
        last_login is refreshed and metadata is merged over the stored one.
        companies_access is only written for superadmins.

        Args:
            user_id: Identity uid
            role: driver, admin or superadmin
            company_id: Company the user belongs to
            force_role_update: Overwrite the role of an existing user
            companies_access: Companies a superadmin can switch between
            metadata: Role-specific extras (driver_id, managed_regions...)
            **extra: Other profile fields (display_name, phone_number...)

        Raises:
            ValidationError: If role is empty or an unknown field is passed
        """
        role = getattr(role, "value", role)
        if not role:
            raise ValidationError("Role cannot be empty")
        if role not in RBACService.ROLE_PERMISSIONS:
            raise ValidationError(f"Invalid role: {role}")

        unknown = set(extra) - USER_EXTRA_FIELDS
        if unknown:
            raise ValidationError(f"Unknown user fields: {', '.join(sorted(unknown))}")

        metadata = to_json(metadata)

        db = SessionLocal()
        try:
            user = db.get(User, user_id)
            now = get_utc_now()

            if user:
                if force_role_update and role != user.role:
                    user.role = role
                if company_id:
                    user.company_id = company_id
                if role == "superadmin" and companies_access is not None:
                    user.companies_access = list(companies_access)
                if metadata:
                    user.user_metadata = {**(user.user_metadata or {}), **metadata}
                user.last_login = now
                user.updated_at = now
                action = "updated"
            else:
                user = User(id=user_id, role=role, status="active", company_id=company_id)
                if role == "superadmin" and companies_access:
                    user.companies_access = list(companies_access)
                if metadata:
                    user.user_metadata = metadata
                db.add(user)
                action = "created"

            for field, value in extra.items():
                setattr(user, field, getattr(value, "value", value))

            db.commit()
            db.refresh(user)

            logger.info(f"✓ Role {role} assigned to user {user_id} ({action})")
            return to_record(UserRecord, user, "user")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to assign role to {user_id}: {e}")
            raise ValidationError(f"Failed to assign role: {str(e)}")
        finally:
            db.close()

    @staticmethod
    def get_user_role_data(user_id: str) -> Optional[UserRecord]:
        """Stored user record, or None when absent"""
        db = SessionLocal()
        try:
            user = db.get(User, user_id)
            return to_record(UserRecord, user, "user") if user else None
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get user {user_id}: {e}")
            raise ValidationError("Failed to retrieve user")
        finally:
            db.close()

    @staticmethod
    def check_user_permission(user_id: str, permission: str) -> bool:
        """
        Check a permission against the stored role row (not the static table).
        Read failures answer False.
        """
        db = SessionLocal()
        try:
            user = db.get(User, user_id)
            if not user or not user.role:
                return False
            role = db.get(Role, user.role)
            if not role:
                return False
            return getattr(permission, "value", permission) in (role.permissions or [])
        except Exception as e:
            logger.warning(f"Permission check failed for {user_id}: {e}")
            return False
        finally:
            db.close()

    @staticmethod
    def update_user_status(user_id: str, status: str) -> UserRecord:
        """
        Set a user's status (active, inactive, suspended).

        Raises:
            NotFoundError: If the user does not exist
        """
        db = SessionLocal()
        try:
            user = db.get(User, user_id)
            if not user:
                raise NotFoundError("User", user_id)

            user.status = getattr(status, "value", status)
            user.updated_at = get_utc_now()
            db.commit()
            db.refresh(user)

            logger.info(f"✓ User {user_id} status set to {user.status}")
            return to_record(UserRecord, user, "user")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update status for {user_id}: {e}")
            raise ValidationError(f"Failed to update user status: {str(e)}")
        finally:
            db.close()

    @staticmethod
    def seed_roles(overwrite: bool = False) -> int:
        """
        Store the static permission table in the role table.

        Args:
            overwrite: Reset permissions of roles that already exist

        Returns:
            Number of roles created or reset
        """
        db = SessionLocal()
        try:
            written = 0
            for role_id, (name, description, level) in RBACService.ROLE_DEFINITIONS.items():
                permissions = [p.value for p in RBACService.get_permissions(role_id)]
                role = db.get(Role, role_id)
                if role and not overwrite:
                    continue
                if role:
                    role.name, role.description, role.level = name, description, level
                    role.permissions = permissions
                else:
                    db.add(Role(id=role_id, name=name, description=description,
                                permissions=permissions, level=level))
                written += 1

            db.commit()
            if written:
                logger.info(f"✓ Seeded {written} roles")
            return written

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to seed roles: {e}")
            raise ValidationError(f"Failed to seed roles: {str(e)}")
        finally:
            db.close()

    @staticmethod
    def get_roles() -> List[RoleRecord]:
        """Stored roles, highest level first, with the number of users holding each"""
        db = SessionLocal()
        try:
            counts = dict(
                db.query(User.role, func.count(User.id)).group_by(User.role).all()
            )
            roles = []
            for role in db.query(Role).order_by(Role.level.desc()).all():
                record = to_record(RoleRecord, role, "role")
                record.users_count = counts.get(role.id, 0)
                roles.append(record)
            return roles
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get roles: {e}")
            raise ValidationError("Failed to retrieve roles")
        finally:
            db.close()

    @staticmethod
    def update_role_permissions(role_id: str, permission: str, granted: bool) -> RoleRecord:
        """
        Grant or revoke one permission on a stored role.

        Raises:
            ValidationError: If the permission is unknown
            NotFoundError: If the role does not exist
        """
        permission = getattr(permission, "value", permission)
        if permission not in {p.value for p in Permission}:
            raise ValidationError(f"Unknown permission: {permission}")

        db = SessionLocal()
        try:
            role = db.get(Role, role_id)
            if not role:
                raise NotFoundError("Role", role_id)

            current = [p for p in (role.permissions or []) if p != permission]
            if granted:
                current.append(permission)
            role.permissions = current
            role.updated_at = get_utc_now()
            db.commit()
            db.refresh(role)

            logger.info(f"✓ Permission {permission} {'granted to' if granted else 'revoked from'} {role_id}")
            return to_record(RoleRecord, role, "role")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update permissions of {role_id}: {e}")
            raise ValidationError(f"Failed to update role permissions: {str(e)}")
        finally:
            db.close()
