# server/main.py
"""
RideNow Fleet Admin - Main FastAPI Application

Multi-company administration backend for a ride-hailing fleet.
Features:
- JWT authentication with role-based access (driver, admin, superadmin)
- Company (tenant) management and superadmin company switching
- Driver and ride records scoped per company
- Dashboard data for the driver, admin and superadmin pages
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.database import init_db, test_connection
from core.config import CORS_ORIGINS
from core.logger import get_logger
from middleware import add_request_id_middleware, register_error_handlers
from routes import include_routes
from services.role_service import RoleService

logger = get_logger(__name__)

APP_NAME = "RideNow Fleet Admin"
APP_VERSION = "1.0.0"

# ==================== FASTAPI APPLICATION ====================

app = FastAPI(
    title=APP_NAME,
    description="Multi-company ride-hailing administration: companies, drivers, rides and dashboards",
    version=APP_VERSION
)

# ==================== MIDDLEWARE SETUP ====================

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(add_request_id_middleware)

# ==================== ERROR HANDLERS ====================

register_error_handlers(app)

# ==================== ROUTE REGISTRATION ====================

include_routes(app)


# ==================== LIFECYCLE ====================

@app.on_event("startup")
async def startup_event():
    """Initialize database and test connection on startup"""
    logger.info(f"🚀 Starting up {APP_NAME}...")

    if not test_connection():
        logger.error("❌ Failed to connect to database on startup!")
        raise RuntimeError("Database connection failed")

    if not init_db():
        logger.error("❌ Failed to initialize database on startup!")
        raise RuntimeError("Database initialization failed")

    # Built-in roles only; stored edits are kept
    RoleService.seed_roles(overwrite=False)

    logger.info(f"✅ {APP_NAME} started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"🛑 Shutting down {APP_NAME}...")


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
        "features": [
            "Role-based dashboards",
            "Multi-company tenancy",
            "Driver and ride management",
            "Live driver locations",
        ],
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    from core.config import APP_HOST, APP_PORT, APP_DEBUG

    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=APP_DEBUG)
