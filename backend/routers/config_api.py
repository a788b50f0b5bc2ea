# backend/routers/config_api.py
from fastapi import APIRouter, Depends

from backend.core.registry import JobRegistry, get_registry

router = APIRouter(tags=["config"])

@router.get("/config")
def get_config(registry: JobRegistry = Depends(get_registry)):
    return {"success": True, "data": registry.config.to_api()}
