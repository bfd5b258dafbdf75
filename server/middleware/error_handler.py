# server/middleware/error_handler.py
"""Global error handling middleware"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from utils.exceptions import RideNowException
from core.logger import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI):
    """Register error handlers with FastAPI app"""

    @app.exception_handler(RideNowException)
    async def ridenow_exception_handler(request: Request, exc: RideNowException):
        """Handle custom RideNow exceptions"""
        log = logger.warning if exc.status_code < 500 else logger.error
        log(f"{exc.code}: {exc.message}")
        content = {
            "error": exc.code,
            "message": exc.message,
            "path": str(request.url.path)
        }
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Unmatched routes and framework HTTP errors"""
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        message = "Page not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": code,
                "message": message,
                "path": str(request.url.path)
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions"""
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
                "path": str(request.url.path)
            }
        )
