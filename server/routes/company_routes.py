# server/routes/company_routes.py
"""Company management routes"""
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from middleware.guards import require_auth, require_role, ensure_company_access
from schemas.company import CompanyRecord, CreateCompanyRequest, UpdateCompanyRequest
from schemas.user import UserRecord, TransferUserRequest
from services.company_service import CompanyService
from services.rbac_service import Permission
from services.session_service import AuthSession
from utils.exceptions import RideNowException, NotFoundError
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/companies", tags=["Companies"])

superadmin_only = require_role(["superadmin"], redirect_to="/dashboard")
company_admins = require_role(["admin", "superadmin"], redirect_to="/dashboard")


@router.post("", response_model=CompanyRecord, status_code=201)
async def create_company(
    request: CreateCompanyRequest,
    session: AuthSession = Depends(require_role(["superadmin"], Permission.CONFIGURE_SYSTEM, "/dashboard"))
):
    """Create a new company"""
    try:
        return CompanyService.create_company(request.model_dump(exclude_none=True))
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error creating company: {e}")
        raise HTTPException(status_code=500, detail="Failed to create company")


@router.get("", response_model=List[CompanyRecord])
async def get_all_companies(session: AuthSession = Depends(require_auth)):
    """Every company, inactive ones included (superadmins only)"""
    try:
        return CompanyService.get_all_companies(session.role)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting companies: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve companies")


@router.get("/active", response_model=List[CompanyRecord])
async def get_active_companies(session: AuthSession = Depends(require_auth)):
    """Active companies"""
    try:
        return CompanyService.get_active_companies()
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting active companies: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve companies")


@router.get("/mine", response_model=List[CompanyRecord])
async def get_my_companies(session: AuthSession = Depends(require_auth)):
    """Companies the signed-in user can reach"""
    try:
        return CompanyService.get_user_companies(session.uid)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting user companies: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve companies")


@router.post("/users/{user_id}/transfer", response_model=UserRecord)
async def transfer_user(
    user_id: str,
    request: TransferUserRequest,
    session: AuthSession = Depends(superadmin_only)
):
    """Move a user to another company, optionally changing role"""
    try:
        return CompanyService.transfer_user_between_companies(
            user_id,
            request.new_company_id,
            new_role=request.new_role,
            keep_access_to_previous_company=request.keep_access_to_previous_company
        )
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error transferring user: {e}")
        raise HTTPException(status_code=500, detail="Failed to transfer user")


@router.get("/{company_id}", response_model=CompanyRecord)
async def get_company(company_id: str, session: AuthSession = Depends(require_auth)):
    """Company details"""
    ensure_company_access(session, company_id)
    try:
        company = CompanyService.get_company(company_id)
        if not company:
            raise NotFoundError("Company", company_id)
        return company
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting company: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve company")


@router.put("/{company_id}", response_model=CompanyRecord)
async def update_company(
    company_id: str,
    request: UpdateCompanyRequest,
    session: AuthSession = Depends(superadmin_only)
):
    """Update company fields"""
    try:
        return CompanyService.update_company(company_id, request.model_dump(exclude_unset=True))
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error updating company: {e}")
        raise HTTPException(status_code=500, detail="Failed to update company")


@router.get("/{company_id}/users", response_model=List[UserRecord])
async def get_company_users(
    company_id: str,
    role: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    include_inactive: bool = Query(False),
    session: AuthSession = Depends(company_admins)
):
    """Users of a company (active only unless asked otherwise)"""
    ensure_company_access(session, company_id)
    try:
        return CompanyService.get_users_by_company(
            company_id, role=role, status=status, limit=limit, include_inactive=include_inactive
        )
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting company users: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve users")


@router.put("/{company_id}/users/{user_id}", response_model=UserRecord)
async def assign_user(company_id: str, user_id: str, session: AuthSession = Depends(superadmin_only)):
    """Assign a user to a company"""
    try:
        return CompanyService.assign_user_to_company(user_id, company_id)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error assigning user: {e}")
        raise HTTPException(status_code=500, detail="Failed to assign user")


@router.delete("/{company_id}/users/{user_id}", response_model=UserRecord)
async def remove_user(company_id: str, user_id: str, session: AuthSession = Depends(superadmin_only)):
    """Detach a user from its company"""
    try:
        return CompanyService.remove_user_from_company(user_id, company_id)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error removing user: {e}")
        raise HTTPException(status_code=500, detail="Failed to remove user")


@router.put("/{company_id}/access/{user_id}", response_model=UserRecord)
async def grant_company_access(company_id: str, user_id: str, session: AuthSession = Depends(superadmin_only)):
    """Give a superadmin access to the company"""
    try:
        return CompanyService.add_company_access_for_superadmin(user_id, company_id)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error granting company access: {e}")
        raise HTTPException(status_code=500, detail="Failed to grant access")


@router.delete("/{company_id}/access/{user_id}", response_model=UserRecord)
async def revoke_company_access(company_id: str, user_id: str, session: AuthSession = Depends(superadmin_only)):
    """Revoke a superadmin's access to the company"""
    try:
        return CompanyService.remove_company_access_for_superadmin(user_id, company_id)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error revoking company access: {e}")
        raise HTTPException(status_code=500, detail="Failed to revoke access")
