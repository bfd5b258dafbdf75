# server/routes/user_routes.py
"""User management routes - role assignment and account status"""
from fastapi import APIRouter, HTTPException, Depends

from middleware.guards import require_auth, require_role
from schemas.user import UserRecord, AssignRoleRequest, UpdateUserStatusRequest
from services.role_service import RoleService
from services.rbac_service import Permission
from services.session_service import AuthSession
from utils.exceptions import RideNowException, NotFoundError, ForbiddenError
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

manage_admins = require_role(["superadmin"], Permission.MANAGE_ADMINS, "/dashboard")


@router.get("/me", response_model=UserRecord)
async def get_me(session: AuthSession = Depends(require_auth)):
    """Stored record of the signed-in user"""
    return session.user


@router.get("/{user_id}", response_model=UserRecord)
async def get_user(user_id: str, session: AuthSession = Depends(require_auth)):
    """User record (self, or any user for superadmins)"""
    if user_id != session.uid and not session.has_permission(Permission.MANAGE_ADMINS):
        raise ForbiddenError("Cannot view other users")
    try:
        user = RoleService.get_user_role_data(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting user: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve user")


@router.put("/{user_id}/role", response_model=UserRecord)
async def assign_role(
    user_id: str,
    request: AssignRoleRequest,
    session: AuthSession = Depends(manage_admins)
):
    """Assign a role (creates the user row when missing)"""
    try:
        return RoleService.assign_user_role(
            user_id,
            request.role,
            company_id=request.company_id,
            force_role_update=request.force_role_update,
            companies_access=request.companies_access,
            metadata=request.user_metadata
        )
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error assigning role: {e}")
        raise HTTPException(status_code=500, detail="Failed to assign role")


@router.put("/{user_id}/status", response_model=UserRecord)
async def update_status(
    user_id: str,
    request: UpdateUserStatusRequest,
    session: AuthSession = Depends(manage_admins)
):
    """Activate, deactivate or suspend a user"""
    try:
        return RoleService.update_user_status(user_id, request.status)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error updating user status: {e}")
        raise HTTPException(status_code=500, detail="Failed to update user status")


@router.get("/{user_id}/permissions/{permission}")
async def check_permission(user_id: str, permission: str, session: AuthSession = Depends(require_auth)):
    """Check a permission against the stored role table"""
    if user_id != session.uid and not session.has_permission(Permission.MANAGE_ROLES):
        raise ForbiddenError("Cannot inspect other users")
    return {
        "user_id": user_id,
        "permission": permission,
        "granted": RoleService.check_user_permission(user_id, permission)
    }
