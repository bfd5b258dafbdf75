# server/routes/health_routes.py
"""
Health Check Endpoints

Endpoints:
- GET /health - Overall service health
- GET /health/db - Database status
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from core.database import get_db, test_connection
from utils.datetime_utils import get_utc_now, to_iso_string
from core.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "RideNow Fleet Admin"
SERVICE_VERSION = "1.0.0"


@router.get("")
async def get_overall_health():
    """
    Overall service health. Returns 503 when the database is unreachable.
    """
    database_ok = test_connection()
    body = {
        "status": "healthy" if database_ok else "unhealthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": to_iso_string(get_utc_now()),
        "components": {"database": "up" if database_ok else "down"},
    }
    if not database_ok:
        logger.warning("Health check failed: database unreachable")
        return JSONResponse(status_code=503, content=body)
    return body


@router.get("/db")
def get_database_health(db: Session = Depends(get_db)):
    """Database connectivity through a request-scoped session"""
    try:
        db.execute(text("SELECT 1"))
        return {"database": "up"}
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return JSONResponse(status_code=503, content={"database": "down"})
