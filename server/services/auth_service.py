# server/services/auth_service.py
"""Authentication service - handles user authentication and password management"""
import hmac
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
import jwt
import bcrypt

from core.database import SessionLocal, User
from core.config import (
    JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRATION_HOURS, BCRYPT_ROUNDS,
    BOOTSTRAP_SECRET_KEY, DEFAULT_ROLE, DEFAULT_USER_STATUS
)
from schemas.user import UserRecord
from services.database_helpers import to_record
from services.rbac_service import RBACService
from utils.exceptions import RideNowException, ValidationError, UnauthorizedError, ForbiddenError, ConflictError
from utils.validators import validate_password_strength, validate_email, validate_full_name
from core.logger import get_logger

logger = get_logger(__name__)

# Roles that can only be self-registered with the bootstrap secret
PRIVILEGED_ROLES = ("admin", "superadmin")


class AuthService:
    """Service for authentication and password management"""

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hash string
        """
        validate_password_strength(password)

        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    @staticmethod
    def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
        """True if the password matches the bcrypt hash."""
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except Exception as e:
            logger.error(f"Password verification error: {e}")
            return False

    @staticmethod
    def create_jwt_token(user_id: str, email: Optional[str], role: Optional[str],
                         company_id: Optional[str] = None) -> str:
        """
        Create JWT token for an authenticated user.

        Args:
            user_id: User uid (token subject)
            email: User email
            role: driver, admin or superadmin
            company_id: Company the user belongs to

        Returns:
            JWT token string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "email": email,
            "role": role,
            "company_id": company_id,
            "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
            "iat": now
        }

        return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

    @staticmethod
    def verify_jwt_token(token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode JWT token.

        Returns:
            Token payload dict if valid, None otherwise
        """
        try:
            return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            return None

    @staticmethod
    def register_user(
        email: str,
        password: str,
        display_name: str,
        role: str = DEFAULT_ROLE,
        company_id: Optional[str] = None,
        phone_number: Optional[str] = None,
        secret_key: Optional[str] = None
    ) -> UserRecord:
        """
        Register a new account.

        Drivers can sign up freely; admin and superadmin accounts need the
        bootstrap secret. A superadmin registered with a company gets that
        company in companies_access.

        Raises:
            ValidationError: If email/password/name/role invalid
            ForbiddenError: If a privileged role is requested without the secret
            ConflictError: If email already exists
        """
        role = getattr(role, "value", role) or DEFAULT_ROLE
        if role not in RBACService.ROLE_PERMISSIONS:
            raise ValidationError(f"Invalid role: {role}")

        if role in PRIVILEGED_ROLES:
            if not secret_key or not hmac.compare_digest(secret_key, BOOTSTRAP_SECRET_KEY):
                logger.warning(f"Privileged registration rejected for: {email}")
                raise ForbiddenError(f"A valid secret key is required to register as {role}")

        db = SessionLocal()
        try:
            email = validate_email(email)
            validate_password_strength(password)
            display_name = validate_full_name(display_name)

            existing = db.query(User).filter(User.email == email).first()
            if existing:
                raise ConflictError(f"User with email {email} already exists")

            user = User(
                email=email,
                password_hash=AuthService.hash_password(password),
                display_name=display_name,
                phone_number=phone_number,
                role=role,
                status=DEFAULT_USER_STATUS,
                company_id=company_id,
                companies_access=[company_id] if role == "superadmin" and company_id else None
            )

            db.add(user)
            db.commit()
            db.refresh(user)

            logger.info(f"✓ User registered: {email} ({role})")
            return to_record(UserRecord, user, "user")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to register user: {e}")
            raise ValidationError(f"Failed to register user: {str(e)}")
        finally:
            db.close()

    @staticmethod
    def authenticate(email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate a user by email and password.

        Last-login stamping is left to the caller (a background task).

        Returns:
            Dict with token, user record and dashboard path

        Raises:
            UnauthorizedError: If credentials invalid or account not active
        """
        db = SessionLocal()
        try:
            user = db.query(User).filter(User.email == (email or "").strip().lower()).first()

            if not user:
                logger.warning(f"Login attempt with non-existent email: {email}")
                raise UnauthorizedError("Invalid email or password")

            if not AuthService.verify_password(password, user.password_hash):
                logger.warning(f"Failed login attempt for: {email}")
                raise UnauthorizedError("Invalid email or password")

            if user.status != "active":
                logger.warning(f"Login attempt for {user.status} account: {email}")
                raise UnauthorizedError("Account is not active. Contact administrator.")

            role = user.role or DEFAULT_ROLE
            token = AuthService.create_jwt_token(user.id, user.email, role, user.company_id)

            logger.info(f"✓ User logged in: {email}")

            return {
                "token": token,
                "user": to_record(UserRecord, user, "user"),
                "dashboard_path": RBACService.get_dashboard_path(role)
            }

        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Authentication error: {e}")
            raise UnauthorizedError("Authentication failed")
        finally:
            db.close()

    @staticmethod
    def change_password(user_id: str, old_password: str, new_password: str) -> bool:
        """
        Change a user's password.

        Raises:
            ValidationError: If the new password is weak or user is missing
            UnauthorizedError: If old password is incorrect
        """
        db = SessionLocal()
        try:
            user = db.get(User, user_id)
            if not user:
                raise ValidationError("User not found")

            if not AuthService.verify_password(old_password, user.password_hash):
                raise UnauthorizedError("Current password is incorrect")

            user.password_hash = AuthService.hash_password(new_password)
            db.commit()

            logger.info(f"✓ Password changed for user: {user.email}")
            return True

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Password change error: {e}")
            raise ValidationError("Failed to change password")
        finally:
            db.close()
