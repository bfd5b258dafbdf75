# server/middleware/auth_middleware.py
"""Authentication middleware for JWT verification"""
from fastapi import Request
from typing import Optional
from services.auth_service import AuthService
from utils.exceptions import UnauthorizedError
from core.logger import get_logger

logger = get_logger(__name__)


def get_token_from_header(request: Request) -> Optional[str]:
    """
    Extract JWT token from Authorization header.

    Expected format: "Bearer <token>"
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise UnauthorizedError("Invalid authorization header")

    return parts[1]


def verify_token(request: Request) -> dict:
    """
    Verify JWT token from request and return payload.

    Raises UnauthorizedError if token is invalid or missing.
    """
    token = get_token_from_header(request)
    if not token:
        raise UnauthorizedError("Missing authorization token")

    payload = AuthService.verify_jwt_token(token)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError("Invalid or expired token")

    return payload