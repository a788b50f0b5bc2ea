# backend/routers/health.py
from fastapi import APIRouter
import time

from backend.config import get_settings

router = APIRouter(tags=["health"])

@router.get("/health")
def health_check():
    settings = get_settings()
    return {
        "success": True,
        "message": "YMIT Backend Server is running",
        "timestamp": int(time.time() * 1000),
        "version": settings.APP_VERSION,
    }
