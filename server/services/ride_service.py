# server/services/ride_service.py
"""Ride service - ride lifecycle within a company"""
from typing import Dict, Any, Optional, List, Union

from core.database import SessionLocal, Ride
from schemas.ride import RideRecord, RIDE_TIMESTAMP_FIELDS
from services.database_helpers import to_record, to_json, apply_updates
from utils.datetime_utils import get_utc_now, to_iso_string
from utils.exceptions import RideNowException, ValidationError, NotFoundError
from core.logger import get_logger

logger = get_logger(__name__)

RIDE_FIELDS = {
    "customer_id", "driver_id", "status", "pickup", "dropoff", "route",
    "payment", "ratings",
}

ORDERABLE_FIELDS = {
    "created_at": Ride.created_at,
    "updated_at": Ride.updated_at,
    "status": Ride.status,
}


def _status_value(status):
    return getattr(status, "value", status)


class RideService:
    """Service for rides within a company"""

    @staticmethod
    def create_ride(company_id: str, ride_data: Dict[str, Any]) -> RideRecord:
        """
        Create a ride under a company.

        Status defaults to pending and timestamps.requested is set to now;
        supplied timestamps are merged over it.

        Raises:
            ValidationError: If required fields are missing
        """
        db = SessionLocal()
        try:
            if not company_id:
                raise ValidationError("company_id is required")
            if not ride_data.get("customer_id"):
                raise ValidationError("customer_id is required")
            if not ride_data.get("pickup") or not ride_data.get("dropoff"):
                raise ValidationError("pickup and dropoff are required")

            fields = {k: to_json(v) for k, v in ride_data.items() if k in RIDE_FIELDS}
            fields["status"] = _status_value(fields.get("status")) or "pending"

            supplied = to_json(ride_data.get("timestamps")) or {}
            timestamps = {"requested": to_iso_string(get_utc_now())}
            timestamps.update({k: v for k, v in supplied.items() if v is not None})

            ride = Ride(company_id=company_id, timestamps=timestamps, **fields)
            db.add(ride)
            db.commit()
            db.refresh(ride)

            logger.info(f"✓ Ride created: {ride.id} in company {company_id}")
            return to_record(RideRecord, ride, "ride")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create ride: {e}")
            raise ValidationError(f"Failed to create ride: {str(e)}")
        finally:
            db.close()

    @staticmethod
    def get_ride_by_id(company_id: str, ride_id: str) -> Optional[RideRecord]:
        """Ride in a company, or None when absent."""
        db = SessionLocal()
        try:
            ride = db.query(Ride).filter(Ride.company_id == company_id, Ride.id == ride_id).first()
            return to_record(RideRecord, ride, "ride") if ride else None
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get ride {ride_id}: {e}")
            raise ValidationError("Failed to retrieve ride")
        finally:
            db.close()

    @staticmethod
    def update_ride(company_id: str, ride_id: str, ride_data: Dict[str, Any]) -> RideRecord:
        """Update ride fields other than status and timestamps"""
        return RideService._update(
            company_id, ride_id, "update ride",
            lambda ride: apply_updates(ride, ride_data, RIDE_FIELDS - {"status", "customer_id"})
        )

    @staticmethod
    def update_ride_status(
        company_id: str,
        ride_id: str,
        status: str,
        timestamp: Optional[str] = None
    ) -> RideRecord:
        """
        Set ride status, optionally stamping one lifecycle timestamp with now.

        Any transition is accepted. The requested timestamp is set at creation
        and cannot be stamped again.

        Raises:
            ValidationError: If the timestamp name is not a lifecycle field
            NotFoundError: If the ride does not exist in the company
        """
        if timestamp is not None and timestamp not in RIDE_TIMESTAMP_FIELDS:
            raise ValidationError(
                f"Invalid timestamp field: {timestamp}",
                {"allowed": list(RIDE_TIMESTAMP_FIELDS)}
            )

        def set_status(ride: Ride):
            ride.status = _status_value(status)
            if timestamp:
                timestamps = dict(ride.timestamps or {})
                timestamps[timestamp] = to_iso_string(get_utc_now())
                ride.timestamps = timestamps

        return RideService._update(company_id, ride_id, "update ride status", set_status)

    @staticmethod
    def get_company_rides(
        company_id: str,
        limit: Optional[int] = None,
        status: Optional[Union[str, List[str]]] = None,
        order_by_field: str = "created_at",
        order_direction: str = "desc"
    ) -> List[RideRecord]:
        """
        Rides of a company.

        Args:
            company_id: Owning company
            limit: Max rides returned
            status: One status or a list of statuses
            order_by_field: created_at, updated_at or status
            order_direction: asc or desc
        """
        if order_by_field not in ORDERABLE_FIELDS:
            raise ValidationError(f"Cannot order rides by: {order_by_field}")
        if order_direction not in ("asc", "desc"):
            raise ValidationError(f"Invalid order direction: {order_direction}")

        db = SessionLocal()
        try:
            query = db.query(Ride).filter(Ride.company_id == company_id)

            if isinstance(status, (list, tuple, set)):
                if status:
                    query = query.filter(Ride.status.in_([_status_value(s) for s in status]))
            elif status:
                query = query.filter(Ride.status == _status_value(status))

            column = ORDERABLE_FIELDS[order_by_field]
            query = query.order_by(column.desc() if order_direction == "desc" else column.asc())

            if limit and limit > 0:
                query = query.limit(limit)

            return [to_record(RideRecord, r, "ride") for r in query.all()]

        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get rides for company {company_id}: {e}")
            raise ValidationError("Failed to retrieve rides")
        finally:
            db.close()

    @staticmethod
    def get_rides_by_customer(company_id: str, customer_id: str) -> List[RideRecord]:
        return RideService._find_by(company_id, Ride.customer_id == customer_id, "customer", customer_id)

    @staticmethod
    def get_rides_by_driver(company_id: str, driver_id: str) -> List[RideRecord]:
        return RideService._find_by(company_id, Ride.driver_id == driver_id, "driver", driver_id)

    @staticmethod
    def _find_by(company_id: str, criterion, owner: str, owner_id: str) -> List[RideRecord]:
        db = SessionLocal()
        try:
            rides = db.query(Ride).filter(
                Ride.company_id == company_id,
                criterion
            ).order_by(Ride.created_at.desc()).all()
            return [to_record(RideRecord, r, "ride") for r in rides]
        except RideNowException:
            raise
        except Exception as e:
            logger.error(f"Failed to get rides for {owner} {owner_id}: {e}")
            raise ValidationError("Failed to retrieve rides")
        finally:
            db.close()

    @staticmethod
    def _update(company_id: str, ride_id: str, action: str, mutate) -> RideRecord:
        db = SessionLocal()
        try:
            ride = db.query(Ride).filter(Ride.company_id == company_id, Ride.id == ride_id).first()
            if not ride:
                raise NotFoundError("Ride", ride_id)

            mutate(ride)
            ride.updated_at = get_utc_now()
            db.commit()
            db.refresh(ride)

            logger.info(f"✓ {action.capitalize()}: {ride_id}")
            return to_record(RideRecord, ride, "ride")

        except RideNowException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to {action} {ride_id}: {e}")
            raise ValidationError(f"Failed to {action}: {str(e)}")
        finally:
            db.close()
