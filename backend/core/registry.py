from copy import deepcopy
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple
import logging
import threading

from backend.config import get_settings
from .earnings import compute_earnings
from .errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from .models import CLAIMABLE, Coordinates, Job, JobStatus, MarketConfig, Payment, Worker, now_ms

logger = logging.getLogger("ymit.registry")

ALL_STATUSES = "all"

# create() keyword -> Job attribute
_JOB_FIELDS = {
    "title", "service_type", "service_name", "customer_name", "contact",
    "description", "amount", "location", "location_coords",
}


class JobRegistry:
    """
    In-memory store for jobs, workers and payments.

    FastAPI runs sync handlers on a thread pool, so every operation holds the
    registry lock; that is what keeps accept and complete exclusive.
    Records handed out are copies, never the stored objects.
    """

    def __init__(self, config: Optional[MarketConfig] = None, default_earnings: float = 500):
        self.config = config or MarketConfig()
        self.default_earnings = default_earnings
        self._jobs: Dict[str, Job] = {}
        self._workers: Dict[str, Worker] = {}
        self._payments: Dict[str, Payment] = {}
        self._lock = threading.RLock()

    # ---------- jobs ----------

    def create_job(self, job_id: Optional[str] = None, status: Optional[str] = None,
                   assigned_worker_id: Optional[str] = None, **fields: Any) -> Job:
        unknown = set(fields) - _JOB_FIELDS
        if unknown:
            raise InvalidInputError(f"Unknown job fields: {', '.join(sorted(unknown))}")

        coords = fields.get("location_coords")
        if isinstance(coords, dict):
            fields["location_coords"] = Coordinates(**coords)
        # drop explicit None so dataclass defaults apply
        fields = {k: v for k, v in fields.items() if v is not None}

        status = status or JobStatus.available.value
        if status in (JobStatus.accepted.value, JobStatus.completed.value) and not assigned_worker_id:
            raise InvalidInputError(f"A {status} job needs an assigned worker")
        if status in CLAIMABLE:
            assigned_worker_id = None

        with self._lock:
            if job_id and job_id in self._jobs:
                raise ConflictError(f"Job {job_id} already exists")
            job = Job(**fields, status=status, assigned_worker_id=assigned_worker_id)
            if job_id:
                job.id = job_id
            if assigned_worker_id:
                _remember(job, assigned_worker_id)
            if status in (JobStatus.accepted.value, JobStatus.completed.value):
                job.accepted_at = job.created_at
            if status == JobStatus.completed.value:
                job.completed_at = job.created_at
            self._jobs[job.id] = job
            logger.info("job created id=%s status=%s amount=%r", job.id, job.status, job.amount)
            return deepcopy(job)

    def get_job(self, job_id: str) -> Job:
        with self._lock:
            return deepcopy(self._job(job_id))

    def list_jobs(self, status: Optional[str] = ALL_STATUSES, worker_id: Optional[str] = None,
                  newest_first: bool = False) -> List[Job]:
        with self._lock:
            jobs = list(self._jobs.values())
            if status and status != ALL_STATUSES:
                jobs = [j for j in jobs if j.status == status]
            if worker_id:
                # current assignee or anyone who held the job before a release
                jobs = [j for j in jobs if worker_id in j.worker_history]
            if newest_first:
                # dict order is creation order and createdAt never changes
                jobs.reverse()
            return deepcopy(jobs)

    def accept_job(self, job_id: str, worker_id: Optional[str]) -> Job:
        with self._lock:
            job = self._job(job_id)
            if job.status not in CLAIMABLE:
                raise ConflictError("Job is not available")
            if not worker_id:
                raise InvalidInputError("workerId is required")

            job.status = JobStatus.accepted.value
            job.assigned_worker_id = worker_id
            _remember(job, worker_id)
            if job.accepted_at is None:
                job.accepted_at = now_ms()
            logger.info("job accepted id=%s worker=%s", job.id, worker_id)
            return deepcopy(job)

    def reject_job(self, job_id: str) -> Job:
        with self._lock:
            job = self._job(job_id)
            if job.status == JobStatus.completed.value:
                raise ConflictError("Job is already completed")

            previous = job.assigned_worker_id
            job.status = JobStatus.available.value
            job.assigned_worker_id = None
            logger.info("job released id=%s worker=%s", job.id, previous)
            return deepcopy(job)

    def complete_job(self, job_id: str, worker_id: Optional[str], time_spent: Any = None,
                     location: Any = None, photo: Optional[str] = None,
                     earnings: Optional[float] = None) -> Tuple[Job, float]:
        with self._lock:
            job = self._job(job_id)
            if not worker_id:
                raise InvalidInputError("workerId is required")
            if job.assigned_worker_id != worker_id:
                raise ForbiddenError("Job is not assigned to this worker")
            if job.status != JobStatus.accepted.value:
                raise ConflictError(f"Job cannot be completed from status '{job.status}'")

            amount = compute_earnings(job.amount, earnings, self.default_earnings)
            job.status = JobStatus.completed.value
            job.earnings = amount
            job.time_spent = time_spent
            job.completion_location = location
            job.completion_photo = photo
            if job.completed_at is None:
                job.completed_at = now_ms()

            worker = self._workers.get(worker_id)
            if worker is not None:
                worker.completed_jobs += 1
                worker.total_earnings += amount
            logger.info("job completed id=%s worker=%s earnings=%s credited=%s",
                        job.id, worker_id, amount, worker is not None)
            return deepcopy(job), amount

    def override_status(self, job_id: str, status: str, worker_id: Optional[str] = None) -> Job:
        """Administrative status override. Keeps the assignment invariant, credits nothing."""
        if not status or not status.strip():
            raise InvalidInputError("status is required")
        status = status.strip()

        with self._lock:
            job = self._job(job_id)
            if status in CLAIMABLE:
                job.assigned_worker_id = None
            elif status in (JobStatus.accepted.value, JobStatus.completed.value):
                assignee = worker_id or job.assigned_worker_id
                if not assignee:
                    raise InvalidInputError(f"A {status} job needs an assigned worker")
                job.assigned_worker_id = assignee
                _remember(job, assignee)
            elif worker_id:
                job.assigned_worker_id = worker_id
                _remember(job, worker_id)

            job.status = status
            if status == JobStatus.accepted.value and job.accepted_at is None:
                job.accepted_at = now_ms()
            if status == JobStatus.completed.value and job.completed_at is None:
                job.completed_at = now_ms()
            logger.warning("job status overridden id=%s status=%s worker=%s",
                           job.id, status, job.assigned_worker_id)
            return deepcopy(job)

    def delete_job(self, job_id: str) -> None:
        with self._lock:
            self._job(job_id)
            del self._jobs[job_id]
            logger.info("job deleted id=%s", job_id)

    # ---------- workers ----------

    def get_or_create_worker(self, worker_id: str) -> Worker:
        if not worker_id:
            raise InvalidInputError("worker id is required")
        with self._lock:
            worker = self._workers.get(worker_id)
            if worker is None:
                worker = Worker.with_defaults(worker_id)
                self._workers[worker_id] = worker
                logger.info("worker registered id=%s", worker_id)
            return deepcopy(worker)

    def get_worker(self, worker_id: str) -> Worker:
        with self._lock:
            return deepcopy(self._worker(worker_id))

    def update_worker_field(self, worker_id: str, field: str) -> Worker:
        with self._lock:
            worker = self._worker(worker_id)
            worker.field = field
            return deepcopy(worker)

    # ---------- payments ----------

    def verify_payment(self, worker_id: str, image_hash: Optional[str] = None,
                       screenshot_time: Any = None) -> Tuple[Payment, Worker]:
        # evidence is recorded, not checked
        with self._lock:
            worker = self._worker(worker_id)
            payment = Payment(
                worker_id=worker_id,
                amount=self.config.premium_price,
                image_hash=image_hash,
                screenshot_time=screenshot_time,
            )
            self._payments[payment.id] = payment

            worker.is_premium = True
            worker.premium_activated_at = now_ms()
            logger.info("payment verified id=%s worker=%s amount=%s", payment.id, worker_id, payment.amount)
            return deepcopy(payment), deepcopy(worker)

    def list_payments(self, worker_id: Optional[str] = None) -> List[Payment]:
        with self._lock:
            payments = [p for p in self._payments.values() if not worker_id or p.worker_id == worker_id]
            return deepcopy(payments)

    # ---------- internals ----------

    def _job(self, job_id: str) -> Job:
        job = self._jobs.get(job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    def _worker(self, worker_id: str) -> Worker:
        worker = self._workers.get(worker_id)
        if worker is None:
            raise NotFoundError("Worker not found")
        return worker


def _remember(job: Job, worker_id: str) -> None:
    if worker_id not in job.worker_history:
        job.worker_history.append(worker_id)


def build_registry() -> JobRegistry:
    s = get_settings()
    config = MarketConfig(
        free_jobs_limit=s.FREE_JOBS_LIMIT,
        premium_price=s.PREMIUM_PRICE,
        max_distance_km=s.MAX_DISTANCE_KM,
    )
    return JobRegistry(config=config, default_earnings=s.DEFAULT_EARNINGS)


# process-wide store; tests swap it through app.dependency_overrides
@lru_cache(maxsize=1)
def get_registry() -> JobRegistry:
    return build_registry()
