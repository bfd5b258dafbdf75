# server/core/database.py
"""Database configuration, models, and session management"""
import uuid
from contextlib import contextmanager

from sqlalchemy import (
    create_engine, text, Column, String, DateTime, Boolean,
    Integer, Float, JSON, Index
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from core.config import DATABASE_URL
from core.logger import get_logger
from utils.datetime_utils import get_utc_now

logger = get_logger(__name__)

# SQLite needs cross-thread access for the test client
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Create engine
engine = create_engine(DATABASE_URL, echo=False, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Nested document parts (location, vehicle, fare breakdown...) live in JSON columns
JSONType = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


def generate_id() -> str:
    """Generated document id (32 hex chars)"""
    return uuid.uuid4().hex


class Company(Base):
    """Company model - top-level tenant owning drivers and rides"""
    __tablename__ = "company"

    id = Column(String(64), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    logo_url = Column(String(1000), nullable=True)
    primary_color = Column(String(7), nullable=True, default="#FF5500")
    address = Column(JSONType, nullable=True)
    settings = Column(JSONType, nullable=True)
    operation_areas = Column(JSONType, nullable=True)
    active = Column(Boolean, nullable=False, default=True, index=True)
    subscription_plan = Column(String(50), nullable=True)
    subscription_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)
    updated_at = Column(DateTime, nullable=False, default=get_utc_now, onupdate=get_utc_now)

    def __repr__(self):
        return f"<Company {self.name}>"


class User(Base):
    """
    Platform user.

    Tenant association is by convention only: company_id is not a foreign key,
    and companies_access is only meaningful for superadmins.
    """
    __tablename__ = "user"

    id = Column(String(128), primary_key=True, default=generate_id)
    email = Column(String(255), nullable=True, unique=True)
    password_hash = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    photo_url = Column(String(1000), nullable=True)
    phone_number = Column(String(50), nullable=True)
    role = Column(String(20), nullable=True, index=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    company_id = Column(String(64), nullable=True)
    companies_access = Column(JSONType, nullable=True)
    selected_company_id = Column(String(64), nullable=True)
    user_metadata = Column("metadata", JSONType, nullable=True)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)
    updated_at = Column(DateTime, nullable=False, default=get_utc_now, onupdate=get_utc_now)
    last_login = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_user_company", "company_id"),
        Index("idx_user_company_status", "company_id", "status"),
    )

    def __repr__(self):
        return f"<User {self.id} {self.role}>"


class Driver(Base):
    """Driver model - partitioned by company_id (NULL only for legacy rows)"""
    __tablename__ = "driver"

    id = Column(String(64), primary_key=True, default=generate_id)
    company_id = Column(String(64), nullable=True, index=True)
    user_id = Column(String(128), nullable=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default="offline", index=True)
    rating = Column(Float, nullable=True)
    completed_rides = Column(Integer, nullable=False, default=0)
    location = Column(JSONType, nullable=True)
    vehicle = Column(JSONType, nullable=True)
    documents = Column(JSONType, nullable=True)
    assigned_ride_id = Column(String(64), nullable=True)
    earnings = Column(JSONType, nullable=True)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)
    updated_at = Column(DateTime, nullable=False, default=get_utc_now, onupdate=get_utc_now)

    __table_args__ = (
        Index("idx_driver_company_status", "company_id", "status"),
    )

    def __repr__(self):
        return f"<Driver {self.full_name}>"


class Ride(Base):
    """Ride model - partitioned by company_id; status transitions are not validated"""
    __tablename__ = "ride"

    id = Column(String(64), primary_key=True, default=generate_id)
    company_id = Column(String(64), nullable=True, index=True)
    customer_id = Column(String(128), nullable=False, index=True)
    driver_id = Column(String(64), nullable=True, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    pickup = Column(JSONType, nullable=False)
    dropoff = Column(JSONType, nullable=False)
    route = Column(JSONType, nullable=True)
    timestamps = Column(JSONType, nullable=False, default=dict)
    payment = Column(JSONType, nullable=True)
    ratings = Column(JSONType, nullable=True)
    created_at = Column(DateTime, nullable=False, default=get_utc_now, index=True)
    updated_at = Column(DateTime, nullable=False, default=get_utc_now, onupdate=get_utc_now)

    __table_args__ = (
        Index("idx_ride_company_status", "company_id", "status"),
        Index("idx_ride_company_created_at", "company_id", "created_at"),
    )

    def __repr__(self):
        return f"<Ride {self.id} {self.status}>"


class Role(Base):
    """Role document - stored copy of the permission table"""
    __tablename__ = "role"

    id = Column(String(20), primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    permissions = Column(JSONType, nullable=False, default=list)
    level = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)
    updated_at = Column(DateTime, nullable=False, default=get_utc_now, onupdate=get_utc_now)

    def __repr__(self):
        return f"<Role {self.id}>"


def get_db() -> Session:
    """Dependency injection for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context():
    """Context manager for synchronous code"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables in database"""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✓ Database tables initialized")
        return True
    except Exception as e:
        logger.error(f"✗ Failed to initialize database: {e}")
        return False


def test_connection():
    """Test database connectivity"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            logger.info("✓ Database connection successful")
            return True
    except Exception as e:
        logger.error(f"✗ Database connection failed: {e}")
        return False


def drop_all_tables():
    """Drop all tables (testing only)"""
    try:
        Base.metadata.drop_all(bind=engine)
        logger.info("✓ All tables dropped")
        return True
    except Exception as e:
        logger.error(f"✗ Failed to drop tables: {e}")
        return False
