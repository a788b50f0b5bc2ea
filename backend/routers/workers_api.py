# backend/routers/workers_api.py
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend.core.registry import JobRegistry, get_registry

router = APIRouter(prefix="/workers", tags=["workers"])

class FieldUpdate(BaseModel):
    field: str = Field(..., min_length=1)

@router.get("/{worker_id}")
def get_worker(worker_id: str, registry: JobRegistry = Depends(get_registry)):
    # first lookup registers the worker with default profile values
    worker = registry.get_or_create_worker(worker_id)
    return {"success": True, "data": worker.to_api()}

@router.patch("/{worker_id}/field")
def update_worker_field(worker_id: str, req: FieldUpdate, registry: JobRegistry = Depends(get_registry)):
    worker = registry.update_worker_field(worker_id, req.field)
    return {"success": True, "data": worker.to_api()}

@router.get("/{worker_id}/payments")
def worker_payments(worker_id: str, registry: JobRegistry = Depends(get_registry)):
    registry.get_worker(worker_id)
    payments = registry.list_payments(worker_id)
    return {"success": True, "data": [p.to_api() for p in payments], "count": len(payments)}
