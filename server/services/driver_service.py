# server/services/driver_service.py
"""Driver service - drivers partitioned by company"""
from typing import Dict, Any, Optional, List

from core.database import SessionLocal, Driver
from schemas.driver import DriverRecord
from services.database_helpers import to_record, to_json, apply_updates
from utils.datetime_utils import get_utc_now, to_iso_string
from utils.exceptions import RideNowException, ValidationError, NotFoundError
from utils.validators import validate_coordinates
from core.logger import get_logger

logger = get_logger(__name__)

DRIVER_FIELDS = {
    "user_id", "full_name", "email", "phone", "status", "rating", "completed_rides",
    "location", "vehicle", "documents", "assigned_ride_id", "earnings",
}


class DriverService:
    """Service for driver records within a company"""

    @staticmethod
    def create_driver_in_company(company_id: str, driver_data: Dict[str, Any]) -> DriverRecord:
        """
        Create a driver under a company.

        Args:
            company_id: Owning company
            driver_data: Driver fields (full_name required)

        Returns:
            The stored driver

        Raises:
            ValidationError: If validation fails
        """
        db = SessionLocal()
        try:
            if not company_id:
                raise ValidationError("company_id is required")

            full_name = (driver_data.get("full_name") or "").strip()
            if len(full_name) < 2:
                raise ValidationError("Driver name must be at least 2 characters")

            fields = {k: to_json(v) for k, v in driver_data.items() if k in DRIVER_FIELDS}
            fields["full_name"] = full_name
            fields["status"] = getattr(fields.get("status"), "value", fields.get("status")) or "offline"

            driver = Driver(company_id=company_id, **fields)
            db.add(driver)
            db.commit()
            db.refresh(driver)

            logger.info(f"✓ Driver created: {full_name} in company {company_id}")
            return to_record(DriverRecord, driver, "driver")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create driver: {e}")
            raise ValidationError(f"Failed to create driver: {str(e)}")
        finally:
            db.close()

    @staticmethod
    def get_company_drivers(company_id: str, status: Optional[str] = None) -> List[DriverRecord]:
        """Drivers of a company, optionally filtered by status"""
        db = SessionLocal()
        try:
            query = db.query(Driver).filter(Driver.company_id == company_id)
            if status:
                query = query.filter(Driver.status == getattr(status, "value", status))

            drivers = query.order_by(Driver.full_name).all()
            return [to_record(DriverRecord, d, "driver") for d in drivers]

        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get drivers for company {company_id}: {e}")
            raise ValidationError("Failed to retrieve drivers")
        finally:
            db.close()

    @staticmethod
    def get_driver_by_id(company_id: str, driver_id: str) -> Optional[DriverRecord]:
        """Driver in a company, or None when absent."""
        db = SessionLocal()
        try:
            driver = db.query(Driver).filter(
                Driver.company_id == company_id,
                Driver.id == driver_id
            ).first()
            return to_record(DriverRecord, driver, "driver") if driver else None
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get driver {driver_id}: {e}")
            raise ValidationError("Failed to retrieve driver")
        finally:
            db.close()

    @staticmethod
    def get_driver_by_user_id(company_id: str, user_id: str) -> Optional[DriverRecord]:
        """Driver profile linked to a user account"""
        db = SessionLocal()
        try:
            driver = db.query(Driver).filter(
                Driver.company_id == company_id,
                Driver.user_id == user_id
            ).first()
            return to_record(DriverRecord, driver, "driver") if driver else None
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get driver for user {user_id}: {e}")
            raise ValidationError("Failed to retrieve driver")
        finally:
            db.close()

    @staticmethod
    def update_driver(company_id: str, driver_id: str, driver_data: Dict[str, Any]) -> DriverRecord:
        """
        Update driver fields; updated_at is refreshed.

        Raises:
            NotFoundError: If the driver does not exist in the company
        """
        if driver_data.get("full_name") is not None and len(driver_data["full_name"].strip()) < 2:
            raise ValidationError("Driver name must be at least 2 characters")

        return DriverService._update(
            company_id, driver_id, "update driver",
            lambda driver: apply_updates(driver, driver_data, DRIVER_FIELDS - {"status", "location"})
        )

    @staticmethod
    def update_driver_location(company_id: str, driver_id: str, lat: float, lng: float) -> DriverRecord:
        """Set the driver's live location, stamping last_updated with now"""
        lat, lng = validate_coordinates(lat, lng)

        def set_location(driver: Driver):
            driver.location = {"lat": lat, "lng": lng, "last_updated": to_iso_string(get_utc_now())}

        return DriverService._update(company_id, driver_id, "update driver location", set_location)

    @staticmethod
    def update_driver_status(company_id: str, driver_id: str, status: str) -> DriverRecord:
        """Set driver status (any transition is accepted)"""
        return DriverService._update(
            company_id, driver_id, "update driver status",
            lambda driver: setattr(driver, "status", getattr(status, "value", status))
        )

    @staticmethod
    def get_driver_locations(company_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Live map feed: drivers that have reported a location.

        Args:
            company_id: Restrict to one company; all companies when None
        """
        db = SessionLocal()
        try:
            query = db.query(Driver).filter(Driver.location.isnot(None))
            if company_id:
                query = query.filter(Driver.company_id == company_id)

            locations = []
            for driver in query.all():
                record = to_record(DriverRecord, driver, "driver")
                if not record.location:
                    continue
                locations.append({
                    "id": record.id,
                    "company_id": record.company_id,
                    "full_name": record.full_name,
                    "status": record.status,
                    "lat": record.location.lat,
                    "lng": record.location.lng,
                    "last_updated": to_iso_string(record.location.last_updated),
                    "vehicle": to_json(record.vehicle),
                })
            return locations

        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get driver locations: {e}")
            raise ValidationError("Failed to retrieve driver locations")
        finally:
            db.close()

    @staticmethod
    def _update(company_id: str, driver_id: str, action: str, mutate) -> DriverRecord:
        db = SessionLocal()
        try:
            driver = db.query(Driver).filter(
                Driver.company_id == company_id,
                Driver.id == driver_id
            ).first()
            if not driver:
                raise NotFoundError("Driver", driver_id)

            mutate(driver)
            driver.updated_at = get_utc_now()
            db.commit()
            db.refresh(driver)

            logger.info(f"✓ {action.capitalize()}: {driver_id}")
            return to_record(DriverRecord, driver, "driver")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to {action} {driver_id}: {e}")
            raise ValidationError(f"Failed to {action}: {str(e)}")
        finally:
            db.close()
