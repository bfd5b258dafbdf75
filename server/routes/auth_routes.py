# server/routes/auth_routes.py
"""Authentication and session routes"""
from fastapi import APIRouter, HTTPException, Depends, BackgroundTasks

from middleware.guards import require_auth
from schemas.auth import (
    RegisterRequest, LoginRequest, LoginResponse, ChangePasswordRequest,
    SelectCompanyRequest, SessionResponse
)
from schemas.user import UserRecord
from services.auth_service import AuthService
from services.session_service import AuthSession, SessionService
from utils.exceptions import RideNowException
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=UserRecord, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new account.

    Drivers can self-register; admin and superadmin accounts need the
    bootstrap secret_key.
    """
    try:
        return AuthService.register_user(
            email=request.email,
            password=request.password,
            display_name=request.display_name,
            role=request.role,
            company_id=request.company_id,
            phone_number=request.phone_number,
            secret_key=request.secret_key
        )
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Registration error: {e}")
        raise HTTPException(status_code=500, detail="Registration failed")


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, background_tasks: BackgroundTasks):
    """
    Login with email and password.

    Returns a bearer token and the dashboard path for the user's role.
    Last-login is stamped after the response is sent.
    """
    try:
        result = AuthService.authenticate(request.email, request.password)
        user = result["user"]
        background_tasks.add_task(SessionService.stamp_last_login, user.id)

        return LoginResponse(
            token=result["token"],
            user=user.model_dump(mode="json"),
            dashboard_path=result["dashboard_path"]
        )
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise HTTPException(status_code=500, detail="Login failed")


@router.post("/change-password")
async def change_password(
    request: ChangePasswordRequest,
    session: AuthSession = Depends(require_auth)
):
    """Change the signed-in user's password"""
    try:
        AuthService.change_password(session.uid, request.old_password, request.new_password)
        return {"message": "Password changed successfully"}
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Password change error: {e}")
        raise HTTPException(status_code=500, detail="Failed to change password")


@router.get("/session", response_model=SessionResponse)
async def get_session(
    background_tasks: BackgroundTasks,
    session: AuthSession = Depends(require_auth)
):
    """
    Resolved authorization context: role, active company, reachable
    companies (superadmins) and permissions.
    """
    background_tasks.add_task(SessionService.stamp_last_login, session.uid)
    return SessionResponse(**session.to_dict())


@router.get("/dashboard-path")
async def get_dashboard_path(session: AuthSession = Depends(require_auth)):
    """Landing page for the signed-in user's role"""
    return {"role": session.role, "dashboard_path": session.get_dashboard_path()}


@router.put("/current-company", response_model=SessionResponse)
async def set_current_company(
    request: SelectCompanyRequest,
    session: AuthSession = Depends(require_auth)
):
    """Switch the active company of a superadmin"""
    try:
        updated = SessionService.set_current_company(session, request.company_id)
        return SessionResponse(**updated.to_dict())
    except RideNowException:
        raise
    except Exception as e:
        logger.error(f"Company switch error: {e}")
        raise HTTPException(status_code=500, detail="Failed to switch company")
