# server/utils/exceptions.py
"""Custom exceptions for RideNow"""
from typing import Any, Optional


class RideNowException(Exception):
    """Base exception for RideNow"""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500,
                 details: Optional[dict[str, Any]] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(RideNowException):
    """Validation error"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, "VALIDATION_ERROR", 400, details)


class NotFoundError(RideNowException):
    """Resource not found"""
    def __init__(self, resource: str, identifier: str = None):
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        super().__init__(message, "NOT_FOUND", 404)


class UnauthorizedError(RideNowException):
    """Not authenticated - the dashboard sends the user back to the login page"""
    def __init__(self, message: str = "Not authenticated", redirect_to: str = "/login"):
        super().__init__(message, "UNAUTHORIZED", 401, {"redirect_to": redirect_to})


class ForbiddenError(RideNowException):
    """Authenticated but not allowed (role or permission)"""
    def __init__(self, message: str = "Permission denied", redirect_to: Optional[str] = None):
        details = {"redirect_to": redirect_to} if redirect_to else None
        super().__init__(message, "FORBIDDEN", 403, details)


class CompanyAccessError(RideNowException):
    """Company outside the caller's tenant scope"""
    def __init__(self, company_id: str):
        super().__init__(
            f"No access to company: {company_id}",
            "COMPANY_MISMATCH",
            403,
            {"company_id": company_id}
        )


class ConflictError(RideNowException):
    """Resource conflict (e.g., duplicate)"""
    def __init__(self, message: str):
        super().__init__(message, "CONFLICT", 409)
