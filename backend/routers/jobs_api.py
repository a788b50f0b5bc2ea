# backend/routers/jobs_api.py
from __future__ import annotations
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from typing import Any, Literal, Optional

from backend.core.errors import InvalidInputError
from backend.core.models import JobStatus
from backend.core.registry import JobRegistry, get_registry

router = APIRouter(prefix="/jobs", tags=["jobs"])

# ---------- Models ----------
class Coords(BaseModel):
    lat: float
    lng: float

class JobCreate(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    serviceType: Optional[str] = None
    serviceName: Optional[str] = None
    customerName: Optional[str] = None
    contact: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[str | int | float] = None
    location: Optional[str] = None
    locationCoords: Optional[Coords] = None
    status: Optional[str] = None
    workerId: Optional[str] = None  # only for jobs created already assigned

class WorkerRef(BaseModel):
    workerId: Optional[str] = None

class CompleteRequest(BaseModel):
    workerId: Optional[str] = None
    timeSpent: Any = None
    location: Any = None
    photo: Optional[str] = None
    earnings: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

class JobUpdate(CompleteRequest):
    status: str

class StatusOverride(BaseModel):
    status: str
    workerId: Optional[str] = None


def _complete(registry: JobRegistry, job_id: str, req: CompleteRequest) -> dict:
    job, earnings = registry.complete_job(
        job_id,
        req.workerId,
        time_spent=req.timeSpent,
        location=req.location,
        photo=req.photo,
        earnings=req.earnings,
    )
    return {"success": True, "data": job.to_api(), "earnings": earnings, "message": "Job completed successfully"}

# ---------- Routes ----------
@router.get("")
def list_jobs(
    status_filter: str = Query("available", alias="status"),
    workerId: Optional[str] = Query(None),
    order: Literal["newest", "inserted"] = Query("newest"),
    registry: JobRegistry = Depends(get_registry),
):
    jobs = registry.list_jobs(status=status_filter, worker_id=workerId, newest_first=(order == "newest"))
    return {"success": True, "data": [j.to_api() for j in jobs], "count": len(jobs)}

@router.post("", status_code=status.HTTP_201_CREATED)
def create_job(req: JobCreate, registry: JobRegistry = Depends(get_registry)):
    job = registry.create_job(
        job_id=req.id,
        status=req.status,
        assigned_worker_id=req.workerId,
        title=req.title,
        service_type=req.serviceType,
        service_name=req.serviceName,
        customer_name=req.customerName,
        contact=req.contact,
        description=req.description,
        amount=None if req.amount is None else str(req.amount),
        location=req.location,
        location_coords=req.locationCoords.model_dump() if req.locationCoords else None,
    )
    return {"success": True, "data": job.to_api(), "message": "Job created successfully"}

@router.get("/{job_id}")
def get_job(job_id: str, registry: JobRegistry = Depends(get_registry)):
    return {"success": True, "data": registry.get_job(job_id).to_api()}

@router.post("/{job_id}/accept")
@router.put("/{job_id}/accept")
def accept_job(job_id: str, req: Optional[WorkerRef] = None, registry: JobRegistry = Depends(get_registry)):
    job = registry.accept_job(job_id, req.workerId if req else None)
    return {"success": True, "data": job.to_api(), "message": "Job accepted successfully"}

@router.post("/{job_id}/reject")
@router.put("/{job_id}/reject")
def reject_job(job_id: str, registry: JobRegistry = Depends(get_registry)):
    job = registry.reject_job(job_id)
    return {"success": True, "data": job.to_api(), "message": "Job released"}

@router.post("/{job_id}/complete")
@router.put("/{job_id}/complete")
def complete_job(job_id: str, req: Optional[CompleteRequest] = None, registry: JobRegistry = Depends(get_registry)):
    return _complete(registry, job_id, req or CompleteRequest())

@router.put("/{job_id}/status")
def override_job_status(job_id: str, req: StatusOverride, registry: JobRegistry = Depends(get_registry)):
    """Administrative override: sets any status, bypassing the lifecycle checks."""
    job = registry.override_status(job_id, req.status, worker_id=req.workerId)
    return {"success": True, "data": job.to_api(), "message": f"Job status set to {job.status}"}

@router.put("/{job_id}")
def update_job(job_id: str, req: JobUpdate, registry: JobRegistry = Depends(get_registry)):
    # only the named transitions; arbitrary statuses go through /status
    if req.status == JobStatus.accepted.value:
        return accept_job(job_id, WorkerRef(workerId=req.workerId), registry)
    if req.status == JobStatus.available.value:
        return reject_job(job_id, registry)
    if req.status == JobStatus.completed.value:
        return _complete(registry, job_id, req)
    raise InvalidInputError(
        f"Unsupported status transition '{req.status}'; use PUT /jobs/{job_id}/status to override"
    )

@router.delete("/{job_id}")
def delete_job(job_id: str, registry: JobRegistry = Depends(get_registry)):
    registry.delete_job(job_id)
    return {"success": True, "message": f"Job {job_id} deleted"}
