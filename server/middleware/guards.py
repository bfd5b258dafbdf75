# server/middleware/guards.py
"""
Route guards as FastAPI dependencies.

require_auth rejects anonymous requests and non-active accounts with a
401 pointing at /login.
require_role and require_permission add a 403 carrying the caller's
redirect path when the resolved role is not allowed.
"""
from typing import Callable, Iterable, Optional

from fastapi import Depends, Request

from middleware.auth_middleware import verify_token
from services.session_service import AuthSession, SessionService
from utils.exceptions import ForbiddenError, CompanyAccessError, UnauthorizedError
from core.logger import get_logger

logger = get_logger(__name__)


async def require_auth(request: Request) -> AuthSession:
    """Resolve the authorization session for the bearer token."""
    payload = verify_token(request)
    session = SessionService.resolve_session(
        payload["sub"],
        identity={"email": payload.get("email")}
    )
    status = getattr(session.user, "status", None)
    status = getattr(status, "value", status)
    if status and status != "active":
        logger.warning(f"Request from {status} account rejected: {session.uid}")
        raise UnauthorizedError("Account is not active. Contact administrator.")
    request.state.session = session
    return session


def require_role(
    allowed_roles: Iterable[str],
    permission: Optional[str] = None,
    redirect_to: str = "/"
) -> Callable:
    """
    Dependency factory gating a route on role membership and, optionally,
    one named permission.

    Usage:
        @router.get("/drivers")
        async def list_drivers(session: AuthSession = Depends(require_role(["admin", "superadmin"]))):
    """
    allowed = {getattr(r, "value", r) for r in allowed_roles}

    async def dependency(session: AuthSession = Depends(require_auth)) -> AuthSession:
        if not session.role or session.role not in allowed:
            logger.warning(f"Role {session.role} denied (allowed: {sorted(allowed)}) for {session.uid}")
            raise ForbiddenError("Role not allowed for this page", redirect_to=redirect_to)
        if permission and not session.has_permission(permission):
            logger.warning(f"Permission {permission} missing for {session.uid}")
            raise ForbiddenError(f"Missing permission: {permission}", redirect_to=redirect_to)
        return session

    return dependency


def require_permission(permission: str, redirect_to: str = "/") -> Callable:
    """Dependency factory gating a route on a single permission."""

    async def dependency(session: AuthSession = Depends(require_auth)) -> AuthSession:
        if not session.has_permission(permission):
            logger.warning(f"Permission {permission} missing for {session.uid}")
            raise ForbiddenError(f"Missing permission: {permission}", redirect_to=redirect_to)
        return session

    return dependency


def ensure_company_access(session: AuthSession, company_id: str) -> None:
    """
    Tenant gate for company-scoped routes.

    Raises:
        CompanyAccessError: If the session cannot reach the company
    """
    if not session.can_access_company(company_id):
        logger.warning(f"Company access denied: {session.uid} -> {company_id}")
        raise CompanyAccessError(company_id)
