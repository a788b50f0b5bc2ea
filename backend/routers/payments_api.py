# backend/routers/payments_api.py
from typing import Any, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.core.errors import InvalidInputError
from backend.core.registry import JobRegistry, get_registry

router = APIRouter(prefix="/payments", tags=["payments"])

class PaymentProof(BaseModel):
    workerId: Optional[str] = None
    imageHash: Optional[str] = None
    screenshotTime: Any = None
    evidence: Optional[str] = None  # older clients send one opaque reference

@router.post("/verify")
def verify_payment(req: PaymentProof, registry: JobRegistry = Depends(get_registry)):
    if not req.workerId:
        raise InvalidInputError("workerId is required")
    payment, worker = registry.verify_payment(
        req.workerId,
        image_hash=req.imageHash or req.evidence,
        screenshot_time=req.screenshotTime,
    )
    return {
        "success": True,
        "data": payment.to_api(),
        "worker": worker.to_api(),
        "message": "Payment verified successfully",
    }
