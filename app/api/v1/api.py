from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth, registration, password, profile, inventory, departments, dashboard, alerts, services, users, reports,
)

# Create main API router
api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(registration.router, prefix="/registration", tags=["registration"])
api_router.include_router(password.router, prefix="/password", tags=["password-management"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(departments.router, prefix="/departments", tags=["departments"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(users.router, prefix="/users", tags=["user-management"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
