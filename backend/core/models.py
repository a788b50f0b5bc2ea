from dataclasses import dataclass, field as dc_field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
import time, uuid


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id(prefix: str) -> str:
    # epoch millis + random suffix, e.g. JOB1718000000000A1B2C3
    return f"{prefix}{now_ms()}{uuid.uuid4().hex[:6].upper()}"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def _to_api(obj) -> dict:
    return {_camel(k): v for k, v in asdict(obj).items()}


class JobStatus(str, Enum):
    available = "available"
    pending = "pending"      # legacy synonym of available
    accepted = "accepted"
    completed = "completed"

# statuses from which a job can be claimed
CLAIMABLE = {JobStatus.available.value, JobStatus.pending.value}


@dataclass
class Coordinates:
    lat: float
    lng: float


@dataclass
class Job:
    id: str = dc_field(default_factory=lambda: new_id("JOB"))
    title: str = "Service Request"
    service_type: str = "general"
    service_name: str = "Service"
    customer_name: str = "Customer"
    contact: str = ""
    description: str = ""
    amount: str = "₹500"
    location: str = ""
    location_coords: Optional[Coordinates] = None
    # plain string so the administrative override can set anything
    status: str = JobStatus.available.value
    assigned_worker_id: Optional[str] = None
    # everyone who has held the job, current assignee included
    worker_history: List[str] = dc_field(default_factory=list)

    created_at: int = dc_field(default_factory=now_ms)
    timestamp: str = dc_field(default_factory=lambda: datetime.now().strftime("%d/%m/%Y, %H:%M:%S"))
    accepted_at: Optional[int] = None
    completed_at: Optional[int] = None

    # completion
    earnings: Optional[float] = None
    time_spent: Any = None
    completion_location: Any = None
    completion_photo: Optional[str] = None

    def to_api(self) -> dict:
        return _to_api(self)


@dataclass
class Worker:
    id: str
    name: str = ""
    phone: str = ""
    field: str = "electronics"
    is_premium: bool = False
    completed_jobs: int = 0
    total_earnings: float = 0
    rating: float = 4.5
    created_at: int = dc_field(default_factory=now_ms)
    premium_activated_at: Optional[int] = None

    @classmethod
    def with_defaults(cls, worker_id: str) -> "Worker":
        return cls(id=worker_id, name=f"Worker {worker_id[-4:]}", phone=worker_id)

    def to_api(self) -> dict:
        return _to_api(self)


@dataclass
class Payment:
    worker_id: str
    amount: float
    image_hash: Optional[str] = None
    screenshot_time: Any = None
    id: str = dc_field(default_factory=lambda: new_id("PAY"))
    status: str = "verified"
    submitted_at: int = dc_field(default_factory=now_ms)

    def to_api(self) -> dict:
        return _to_api(self)


@dataclass(frozen=True)
class MarketConfig:
    free_jobs_limit: int = 3
    premium_price: float = 20
    max_distance_km: float = 10

    def to_api(self) -> dict:
        return _to_api(self)
