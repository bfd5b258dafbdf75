# server/routes/__init__.py
from .auth_routes import router as auth_router
from .company_routes import router as company_router
from .driver_routes import router as driver_router
from .ride_routes import router as ride_router
from .user_routes import router as user_router
from .role_routes import router as role_router
from .dashboard_routes import router as dashboard_router
from .health_routes import router as health_router


def include_routes(app):
    """Include all routers in the FastAPI app."""
    for router in (
        auth_router,
        company_router,
        driver_router,
        ride_router,
        user_router,
        role_router,
        dashboard_router,
        health_router,
    ):
        app.include_router(router)
