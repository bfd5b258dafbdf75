# server/routes/dashboard_routes.py
"""Dashboard routes - data behind the driver, admin and superadmin pages"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from middleware.guards import require_auth, require_role
from services import dashboard_service, mock_data
from services.company_service import CompanyService
from services.driver_service import DriverService
from services.ride_service import RideService
from services.rbac_service import RBACService
from services.role_service import RoleService
from services.session_service import AuthSession
from utils.datetime_utils import get_utc_now
from utils.exceptions import RideNowException
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])

driver_pages = require_role(["driver", "admin", "superadmin"])
admin_pages = require_role(["admin", "superadmin"])
superadmin_pages = require_role(["superadmin"])


@router.get("")
async def get_dashboard_home(session: AuthSession = Depends(require_auth)):
    """Account panel: who is signed in and where their dashboard lives"""
    role_name = RBACService.ROLE_DEFINITIONS.get(session.role, ("Usuario",))[0]
    return {
        "user_id": session.uid,
        "email": session.user.email if session.user else None,
        "role": session.role,
        "role_name": role_name,
        "company": session.company,
        "dashboard_path": session.get_dashboard_path(),
    }


# ==================== DRIVER ====================

@router.get("/driver")
async def get_driver_home(session: AuthSession = Depends(driver_pages)):
    """Driver profile, availability and ride counters of the signed-in driver"""
    try:
        driver = None
        if session.company_id:
            driver = DriverService.get_driver_by_user_id(session.company_id, session.uid)
        return {
            "driver": driver,
            "status": driver.status if driver else "offline",
            "completed_rides": driver.completed_rides if driver else 0,
            "rating": driver.rating if driver else None,
        }
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error loading driver dashboard: {e}")
        raise HTTPException(status_code=500, detail="Failed to load dashboard")


@router.get("/driver/rides")
async def get_driver_rides_page(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query("all"),
    date: Optional[str] = Query("all"),
    session: AuthSession = Depends(driver_pages)
):
    """Ride history with filters and summary cards"""
    rides = dashboard_service.filter_rides(mock_data.DRIVER_RIDES, search, status, date)
    return {
        "rides": rides,
        "dates": dashboard_service.unique_dates(mock_data.DRIVER_RIDES),
        "summary": dashboard_service.summarize_driver_rides(rides),
    }


@router.get("/driver/map")
async def get_drivers_map(session: AuthSession = Depends(driver_pages)):
    """Live driver positions in the active company (all companies for superadmins without one)"""
    try:
        company_id = session.company_id
        if not company_id and not session.is_super_admin:
            return {"company_id": None, "drivers": []}
        return {
            "company_id": company_id,
            "drivers": DriverService.get_driver_locations(company_id),
        }
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error loading driver map: {e}")
        raise HTTPException(status_code=500, detail="Failed to load driver locations")


# ==================== ADMIN ====================

@router.get("/admin")
async def get_admin_home(session: AuthSession = Depends(admin_pages)):
    """Active drivers, rides today and drivers awaiting approval for the active company"""
    try:
        if not session.company_id:
            return {"company": None, "active_drivers": 0, "rides_today": 0, "pending_drivers": 0}

        drivers = DriverService.get_company_drivers(session.company_id)
        today = get_utc_now().date()
        rides = RideService.get_company_rides(session.company_id)

        return {
            "company": session.company,
            "active_drivers": sum(1 for d in drivers if d.status in ("available", "busy")),
            "rides_today": sum(1 for r in rides if r.created_at and r.created_at.date() == today),
            "pending_drivers": sum(
                1 for d in drivers
                if d.documents and d.documents.license and not d.documents.license.verified
            ),
        }
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error loading admin dashboard: {e}")
        raise HTTPException(status_code=500, detail="Failed to load dashboard")


@router.get("/admin/drivers")
async def get_admin_drivers_page(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query("all"),
    session: AuthSession = Depends(admin_pages)
):
    return {"drivers": dashboard_service.filter_drivers(mock_data.DRIVERS, search, status)}


@router.get("/admin/rides")
async def get_admin_rides_page(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query("all"),
    date: Optional[str] = Query("all"),
    session: AuthSession = Depends(admin_pages)
):
    """All rides with filters; summary cards cover the unfiltered list"""
    return {
        "rides": dashboard_service.filter_rides(mock_data.ADMIN_RIDES, search, status, date),
        "dates": dashboard_service.unique_dates(mock_data.ADMIN_RIDES),
        "summary": dashboard_service.summarize_admin_rides(mock_data.ADMIN_RIDES),
    }


@router.get("/admin/stats")
async def get_admin_stats(
    period: str = Query("week"),
    session: AuthSession = Depends(admin_pages)
):
    return dashboard_service.get_stats("admin", period)


# ==================== SUPERADMIN ====================

@router.get("/superadmin")
async def get_superadmin_home(session: AuthSession = Depends(superadmin_pages)):
    """Platform-wide counters"""
    try:
        users_by_role = {role.id: role.users_count for role in RoleService.get_roles()}
        return {
            "users_by_role": users_by_role,
            "total_users": sum(users_by_role.values()),
            "active_regions": len(dashboard_service.filter_regions(mock_data.REGIONS, status="active")),
            "companies": len(session.companies),
        }
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error loading superadmin dashboard: {e}")
        raise HTTPException(status_code=500, detail="Failed to load dashboard")


@router.get("/superadmin/companies")
async def get_superadmin_companies(session: AuthSession = Depends(superadmin_pages)):
    try:
        return {"companies": CompanyService.get_all_companies(session.role)}
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error loading companies: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve companies")


@router.get("/superadmin/users")
async def get_superadmin_users_page(
    search: Optional[str] = Query(None),
    role: Optional[str] = Query("all"),
    status: Optional[str] = Query("all"),
    session: AuthSession = Depends(superadmin_pages)
):
    return {"users": dashboard_service.filter_users(mock_data.USERS, search, role, status)}


@router.get("/superadmin/regions")
async def get_superadmin_regions_page(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query("all"),
    session: AuthSession = Depends(superadmin_pages)
):
    return {"regions": dashboard_service.filter_regions(mock_data.REGIONS, search, status)}


@router.get("/superadmin/roles")
async def get_superadmin_roles_page(session: AuthSession = Depends(superadmin_pages)):
    return {"roles": mock_data.ROLES}


@router.get("/superadmin/stats")
async def get_superadmin_stats(
    period: str = Query("week"),
    session: AuthSession = Depends(superadmin_pages)
):
    return dashboard_service.get_stats("superadmin", period)
