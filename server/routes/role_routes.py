# server/routes/role_routes.py
"""Stored role table routes"""
from typing import List

from fastapi import APIRouter, HTTPException, Depends

from middleware.guards import require_role
from schemas.role import RoleRecord, RolePermissionRequest
from services.role_service import RoleService
from services.rbac_service import Permission
from services.session_service import AuthSession
from utils.exceptions import RideNowException
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/roles", tags=["Roles"])

manage_roles = require_role(["superadmin"], Permission.MANAGE_ROLES, "/dashboard")


@router.get("", response_model=List[RoleRecord])
async def get_roles(session: AuthSession = Depends(manage_roles)):
    """Stored roles with their permissions and user counts"""
    try:
        return RoleService.get_roles()
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error getting roles: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve roles")


@router.post("/seed")
async def seed_roles(
    overwrite: bool = False,
    session: AuthSession = Depends(require_role(["superadmin"], Permission.CONFIGURE_SYSTEM, "/dashboard"))
):
    """Write the built-in permission table into the role table"""
    try:
        return {"seeded": RoleService.seed_roles(overwrite=overwrite)}
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error seeding roles: {e}")
        raise HTTPException(status_code=500, detail="Failed to seed roles")


@router.post("/{role_id}/permissions", response_model=RoleRecord)
async def grant_permission(role_id: str, request: RolePermissionRequest,
                           session: AuthSession = Depends(manage_roles)):
    try:
        return RoleService.update_role_permissions(role_id, request.permission, granted=True)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error granting permission: {e}")
        raise HTTPException(status_code=500, detail="Failed to update role")


@router.delete("/{role_id}/permissions/{permission}", response_model=RoleRecord)
async def revoke_permission(role_id: str, permission: str, session: AuthSession = Depends(manage_roles)):
    try:
        return RoleService.update_role_permissions(role_id, permission, granted=False)
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Error revoking permission: {e}")
        raise HTTPException(status_code=500, detail="Failed to update role")
