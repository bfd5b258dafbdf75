# server/routes/ride_routes.py
"""Ride routes - scoped to a company"""
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from middleware.guards import require_auth, require_permission, ensure_company_access
from schemas.ride import RideRecord, CreateRideRequest, UpdateRideRequest, UpdateRideStatusRequest
from services.driver_service import DriverService
from services.ride_service import RideService
from services.rbac_service import Permission
from services.session_service import AuthSession
from utils.exceptions import RideNowException, NotFoundError, ForbiddenError
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/companies/{company_id}/rides", tags=["Rides"])

view_all_rides = require_permission(Permission.VIEW_ALL_RIDES, redirect_to="/dashboard")
view_own_rides = require_permission(Permission.VIEW_OWN_RIDES, redirect_to="/dashboard")


def _own_driver_id(session: AuthSession, company_id: str) -> str:
    driver = DriverService.get_driver_by_user_id(company_id, session.uid)
    if not driver:
        raise NotFoundError("Driver profile", session.uid)
    return driver.id


@router.get("", response_model=List[RideRecord])
async def get_rides(
    company_id: str,
    status: Optional[List[str]] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    order_by: str = Query("created_at"),
    order: Literal["asc", "desc"] = Query("desc"),
    session: AuthSession = Depends(view_all_rides)
):
    """Rides of the company, newest first by default"""
    ensure_company_access(session, company_id)
    try:
        return RideService.get_company_rides(
            company_id, limit=limit, status=status, order_by_field=order_by, order_direction=order
        )
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting rides: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve rides")


@router.post("", response_model=RideRecord, status_code=201)
async def create_ride(
    company_id: str,
    request: CreateRideRequest,
    session: AuthSession = Depends(view_all_rides)
):
    """Create a ride request"""
    ensure_company_access(session, company_id)
    try:
        return RideService.create_ride(company_id, request.model_dump(exclude_none=True))
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error creating ride: {e}")
        raise HTTPException(status_code=500, detail="Failed to create ride")


@router.get("/mine", response_model=List[RideRecord])
async def get_my_rides(company_id: str, session: AuthSession = Depends(view_own_rides)):
    """Rides assigned to the signed-in driver"""
    ensure_company_access(session, company_id)
    try:
        return RideService.get_rides_by_driver(company_id, _own_driver_id(session, company_id))
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting driver rides: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve rides")


@router.get("/customer/{customer_id}", response_model=List[RideRecord])
async def get_customer_rides(company_id: str, customer_id: str, session: AuthSession = Depends(view_all_rides)):
    ensure_company_access(session, company_id)
    try:
        return RideService.get_rides_by_customer(company_id, customer_id)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting customer rides: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve rides")


@router.get("/driver/{driver_id}", response_model=List[RideRecord])
async def get_driver_rides(company_id: str, driver_id: str, session: AuthSession = Depends(view_all_rides)):
    ensure_company_access(session, company_id)
    try:
        return RideService.get_rides_by_driver(company_id, driver_id)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting driver rides: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve rides")


@router.get("/{ride_id}", response_model=RideRecord)
async def get_ride(company_id: str, ride_id: str, session: AuthSession = Depends(require_auth)):
    """Ride details (any ride for managers, assigned rides for drivers)"""
    ensure_company_access(session, company_id)
    try:
        ride = RideService.get_ride_by_id(company_id, ride_id)
        if not ride:
            raise NotFoundError("Ride", ride_id)
        if not session.has_permission(Permission.VIEW_ALL_RIDES):
            if not session.has_permission(Permission.VIEW_OWN_RIDES) or \
                    ride.driver_id != _own_driver_id(session, company_id):
                raise ForbiddenError("Ride not assigned to you", redirect_to="/dashboard/driver")
        return ride
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting ride: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve ride")


@router.put("/{ride_id}", response_model=RideRecord)
async def update_ride(
    company_id: str,
    ride_id: str,
    request: UpdateRideRequest,
    session: AuthSession = Depends(view_all_rides)
):
    """Update ride details (driver assignment, fare, ratings...)"""
    ensure_company_access(session, company_id)
    try:
        return RideService.update_ride(company_id, ride_id, request.model_dump(exclude_unset=True))
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error updating ride: {e}")
        raise HTTPException(status_code=500, detail="Failed to update ride")


@router.put("/{ride_id}/status", response_model=RideRecord)
async def update_ride_status(
    company_id: str,
    ride_id: str,
    request: UpdateRideStatusRequest,
    session: AuthSession = Depends(require_auth)
):
    """
    Change ride status, optionally stamping a lifecycle timestamp.
    Managers can update any ride; drivers that accept rides only their own.
    """
    ensure_company_access(session, company_id)
    try:
        if not session.has_permission(Permission.VIEW_ALL_RIDES):
            if not session.has_permission(Permission.ACCEPT_RIDES):
                raise ForbiddenError(f"Missing permission: {Permission.ACCEPT_RIDES.value}")
            ride = RideService.get_ride_by_id(company_id, ride_id)
            if not ride:
                raise NotFoundError("Ride", ride_id)
            if ride.driver_id != _own_driver_id(session, company_id):
                raise ForbiddenError("Ride not assigned to you", redirect_to="/dashboard/driver")

        return RideService.update_ride_status(company_id, ride_id, request.status, request.timestamp)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error updating ride status: {e}")
        raise HTTPException(status_code=500, detail="Failed to update ride status")
