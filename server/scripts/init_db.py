# server/scripts/init_db.py
"""
Database initialization script - Create tables, roles, company, and superadmin

Usage:
    python scripts/init_db.py [superadmin-email]

This script will:
1. Create all database tables
2. Store the built-in role table
3. Create the default company
4. Create a superadmin with access to the default company
5. Display the generated password for the superadmin
"""

import sys
import secrets
import string
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.database import init_db, test_connection, get_db_context, SessionLocal, User
from core.config import DATABASE_URL, DEFAULT_COMPANY_ID
from services.auth_service import AuthService
from services.role_service import RoleService
from scripts.migrate_to_multicompany import ensure_default_company
from core.logger import get_logger

logger = get_logger(__name__)

SUPERADMIN_EMAIL = "superadmin@ridenow.com"
SUPERADMIN_NAME = "RideNow Superadmin"


def generate_password(length: int = 16) -> str:
    """
    Generate a random password that passes the strength check
    (at least one upper, one lower and one digit).
    """
    letters = secrets.choice(string.ascii_uppercase) + secrets.choice(string.ascii_lowercase)
    digit = secrets.choice(string.digits)

    all_chars = string.ascii_letters + string.digits + '!@#$%^&*()'
    remaining = ''.join(secrets.choice(all_chars) for _ in range(length - 3))

    password_chars = list(letters + digit + remaining)
    secrets.SystemRandom().shuffle(password_chars)
    return ''.join(password_chars)


def create_superadmin(email: str, password: str) -> bool:
    """
    Create the superadmin user attached to the default company.

    Returns:
        True if created or already present, False on failure
    """
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email).first():
            logger.info(f"✓ Superadmin '{email}' already exists")
            return True

        db.add(User(
            email=email,
            password_hash=AuthService.hash_password(password),
            display_name=SUPERADMIN_NAME,
            role="superadmin",
            status="active",
            company_id=DEFAULT_COMPANY_ID,
            companies_access=[DEFAULT_COMPANY_ID],
        ))
        db.commit()

        logger.info(f"✓ Created superadmin: {email}")
        return True

    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create superadmin: {e}")
        return False
    finally:
        db.close()


def initialize_database(email: str = SUPERADMIN_EMAIL) -> bool:
    """
    Initialize database with tables, roles, default company and superadmin.

    Returns:
        True if successful, False otherwise
    """
    logger.info("🚀 RideNow database initialization")

    if not test_connection():
        logger.error(f"❌ Cannot connect to database: {DATABASE_URL}")
        return False

    if not init_db():
        logger.error("❌ Failed to initialize database tables")
        return False

    RoleService.seed_roles()

    with get_db_context() as db:
        ensure_default_company(db)

    generated_password = generate_password(16)
    if not create_superadmin(email, generated_password):
        logger.error("❌ Failed to create superadmin")
        return False

    print("\n" + "=" * 70)
    print("✅ DATABASE INITIALIZATION COMPLETE")
    print("=" * 70)
    print("\n📋 SUPERADMIN CREDENTIALS:\n")
    print(f"   Email:    {email}")
    print(f"   Password: {generated_password}")
    print("\n⚠️  Save the password now, it will NOT be shown again.")
    print("   (Ignore it if the superadmin already existed.)")
    print("\n" + "=" * 70 + "\n")

    return True


if __name__ == "__main__":
    try:
        target_email = sys.argv[1] if len(sys.argv) > 1 else SUPERADMIN_EMAIL
        sys.exit(0 if initialize_database(target_email) else 1)
    except KeyboardInterrupt:
        logger.info("⚠️ Initialization cancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)
