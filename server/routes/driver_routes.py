# server/routes/driver_routes.py
"""Driver routes - scoped to a company"""
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from middleware.guards import require_auth, require_permission, ensure_company_access
from schemas.driver import (
    DriverRecord, CreateDriverRequest, UpdateDriverRequest,
    UpdateDriverStatusRequest, UpdateLocationRequest
)
from services.driver_service import DriverService
from services.rbac_service import Permission
from services.session_service import AuthSession
from utils.exceptions import RideNowException, NotFoundError, ForbiddenError
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/companies/{company_id}/drivers", tags=["Drivers"])

manage_drivers = require_permission(Permission.MANAGE_DRIVERS, redirect_to="/dashboard")


def _check_driver_access(session: AuthSession, company_id: str, driver_id: str, own_permission: str) -> None:
    """Managers reach every driver of the company; drivers only their own profile."""
    ensure_company_access(session, company_id)
    if session.has_permission(Permission.MANAGE_DRIVERS):
        return

    driver = DriverService.get_driver_by_id(company_id, driver_id)
    if not driver:
        raise NotFoundError("Driver", driver_id)
    if driver.user_id != session.uid or not session.has_permission(own_permission):
        raise ForbiddenError("Drivers can only update their own profile", redirect_to="/dashboard/driver")


@router.get("", response_model=List[DriverRecord])
async def get_drivers(
    company_id: str,
    status: Optional[str] = Query(None),
    session: AuthSession = Depends(manage_drivers)
):
    """Drivers of the company"""
    ensure_company_access(session, company_id)
    try:
        return DriverService.get_company_drivers(company_id, status=status)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting drivers: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve drivers")


@router.post("", response_model=DriverRecord, status_code=201)
async def create_driver(
    company_id: str,
    request: CreateDriverRequest,
    session: AuthSession = Depends(manage_drivers)
):
    """Create a driver in the company"""
    ensure_company_access(session, company_id)
    try:
        return DriverService.create_driver_in_company(company_id, request.model_dump(exclude_none=True))
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error creating driver: {e}")
        raise HTTPException(status_code=500, detail="Failed to create driver")


@router.get("/me", response_model=DriverRecord)
async def get_my_driver_profile(company_id: str, session: AuthSession = Depends(require_auth)):
    """Driver profile linked to the signed-in user"""
    ensure_company_access(session, company_id)
    try:
        driver = DriverService.get_driver_by_user_id(company_id, session.uid)
        if not driver:
            raise NotFoundError("Driver profile", session.uid)
        return driver
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting driver profile: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve driver")


@router.get("/{driver_id}", response_model=DriverRecord)
async def get_driver(company_id: str, driver_id: str, session: AuthSession = Depends(manage_drivers)):
    """Driver details"""
    ensure_company_access(session, company_id)
    try:
        driver = DriverService.get_driver_by_id(company_id, driver_id)
        if not driver:
            raise NotFoundError("Driver", driver_id)
        return driver
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting driver: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve driver")


@router.put("/{driver_id}", response_model=DriverRecord)
async def update_driver(
    company_id: str,
    driver_id: str,
    request: UpdateDriverRequest,
    session: AuthSession = Depends(manage_drivers)
):
    """Update driver profile fields"""
    ensure_company_access(session, company_id)
    try:
        return DriverService.update_driver(company_id, driver_id, request.model_dump(exclude_unset=True))
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error updating driver: {e}")
        raise HTTPException(status_code=500, detail="Failed to update driver")


@router.put("/{driver_id}/status", response_model=DriverRecord)
async def update_driver_status(
    company_id: str,
    driver_id: str,
    request: UpdateDriverStatusRequest,
    session: AuthSession = Depends(require_auth)
):
    """Change driver availability (managers, or the driver themself)"""
    _check_driver_access(session, company_id, driver_id, Permission.UPDATE_OWN_STATUS)
    try:
        return DriverService.update_driver_status(company_id, driver_id, request.status)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error updating driver status: {e}")
        raise HTTPException(status_code=500, detail="Failed to update driver status")


@router.put("/{driver_id}/location", response_model=DriverRecord)
async def update_driver_location(
    company_id: str,
    driver_id: str,
    request: UpdateLocationRequest,
    session: AuthSession = Depends(require_auth)
):
    """Report the driver's live position"""
    _check_driver_access(session, company_id, driver_id, Permission.UPDATE_OWN_LOCATION)
    try:
        return DriverService.update_driver_location(company_id, driver_id, request.lat, request.lng)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error updating driver location: {e}")
        raise HTTPException(status_code=500, detail="Failed to update driver location")
