from fastapi import APIRouter

from app.features.qr.routes.qr import router as qr_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(qr_router)
