# server/scripts/migrate_to_multicompany.py
"""
One-off migration to the multi-company layout.

Usage:
    python scripts/migrate_to_multicompany.py

This script will:
1. Create the default company if it doesn't exist
2. Give superadmins without a company access to the default company
3. Assign every other user without a company to the default company
4. Move legacy drivers and rides (no company) into the default company

Everything after step 1 runs in one transaction. Running it again only
touches rows that are still unassigned.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.database import test_connection, SessionLocal, Company, User, Driver, Ride
from core.config import DATABASE_URL, DEFAULT_COMPANY_ID, DEFAULT_COMPANY_NAME, DEFAULT_PRIMARY_COLOR
from services.database_helpers import dedupe
from utils.datetime_utils import get_utc_now
from core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONTACT_EMAIL = "info@ridenow.com"


def ensure_default_company(db) -> bool:
    """
    Create the default company when missing.

    Returns:
        True if it was created, False if it already existed
    """
    if db.get(Company, DEFAULT_COMPANY_ID):
        logger.info(f"✓ Default company '{DEFAULT_COMPANY_ID}' already exists")
        return False

    db.add(Company(
        id=DEFAULT_COMPANY_ID,
        name=DEFAULT_COMPANY_NAME,
        contact_email=DEFAULT_CONTACT_EMAIL,
        primary_color=DEFAULT_PRIMARY_COLOR,
        active=True,
    ))
    db.commit()
    logger.info(f"✓ Created default company: {DEFAULT_COMPANY_NAME} ({DEFAULT_COMPANY_ID})")
    return True


def migrate_users(db) -> int:
    """Attach users without a company to the default company."""
    count = 0
    now = get_utc_now()
    for user in db.query(User).filter(User.company_id.is_(None)).all():
        if user.role == "superadmin":
            current = user.companies_access if isinstance(user.companies_access, list) else []
            if DEFAULT_COMPANY_ID in current:
                continue
            user.companies_access = dedupe(current + [DEFAULT_COMPANY_ID])
        else:
            user.company_id = DEFAULT_COMPANY_ID
        user.updated_at = now
        count += 1
    return count


def migrate_legacy_rows(db, model) -> int:
    """Move rows with no company (drivers or rides) into the default company."""
    now = get_utc_now()
    rows = db.query(model).filter(model.company_id.is_(None)).all()
    for row in rows:
        row.company_id = DEFAULT_COMPANY_ID
        row.updated_at = now
    return len(rows)


def run_migration() -> dict:
    """
    Run the migration.

    Returns:
        Counts of migrated users, drivers and rides and whether the default
        company was created

    Raises:
        RuntimeError: If the database is unreachable
    """
    if not test_connection():
        logger.error(f"❌ Cannot connect to database: {DATABASE_URL}")
        raise RuntimeError("Database connection failed")

    db = SessionLocal()
    try:
        company_created = ensure_default_company(db)

        counts = {
            "company_created": company_created,
            "users": migrate_users(db),
            "drivers": migrate_legacy_rows(db, Driver),
            "rides": migrate_legacy_rows(db, Ride),
        }
        db.commit()

        logger.info(
            f"✓ Migration complete: {counts['users']} users, "
            f"{counts['drivers']} drivers, {counts['rides']} rides"
        )
        return counts

    except Exception as e:
        db.rollback()
        logger.error(f"Migration failed, rolled back: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    print("📝 RideNow multi-company migration")
    print("-" * 60)
    try:
        result = run_migration()
        print(f"   Default company created: {'yes' if result['company_created'] else 'no (already existed)'}")
        print(f"   Users migrated:          {result['users']}")
        print(f"   Drivers migrated:        {result['drivers']}")
        print(f"   Rides migrated:          {result['rides']}")
        print("✅ Migration completed")
        sys.exit(0)
    except Exception as e:
        print(f"❌ Migration failed: {e}")
        sys.exit(1)
