from fastapi import APIRouter
from app.api.v1.endpoints.auth import login, register
from app.api.v1.endpoints.logistics import shipments

api_router = APIRouter()

# Authentication routes
api_router.include_router(login.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(register.router, prefix="/auth", tags=["Authentication"])

# Logistics routes
api_router.include_router(shipments.router, prefix="/shipments", tags=["Shipments"])
