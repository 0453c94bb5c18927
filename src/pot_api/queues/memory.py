import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from pot_api.queues.backend import Clock, current_timestamp
from pot_api.schemas.jobs import Job, JobInput

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_SECONDS = 60 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 10 * 60


class InMemoryBackend:
    """Process-local job store with a periodic expiry sweep.

    Records are evicted once their ``created_at`` is older than the retention
    window, whatever their status. Updates do not extend retention.
    """

    name = "memory"

    def __init__(
        self,
        retention_seconds: int = DEFAULT_RETENTION_SECONDS,
        sweep_interval_seconds: int = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Clock = current_timestamp,
    ):
        self.retention = timedelta(seconds=retention_seconds)
        self.sweep_interval_seconds = sweep_interval_seconds
        self.clock = clock
        self._jobs: Dict[str, Job] = {}
        self._scheduler: Optional[AsyncIOScheduler] = None

    async def create_job(self, job_input: JobInput) -> Job:
        job = Job.new(job_input, self.clock())
        self._jobs[job.id] = job
        return job.model_copy(deep=True)

    async def get_job(self, job_id: str) -> Optional[Job]:
        job = self._jobs.get(job_id)
        if job is None:
            return None
        # Callers get a snapshot; only update_job changes stored state.
        return job.model_copy(deep=True)

    async def update_job(self, job_id: str, **fields: Any) -> None:
        job = self._jobs.get(job_id)
        if job is None:
            logger.debug("Ignoring update for unknown job %s", job_id)
            return
        self._jobs[job_id] = job.merge(self.clock(), **fields)

    async def sweep(self, now: Optional[datetime] = None) -> int:
        """Evict every job created before the retention window."""
        cutoff = (now or self.clock()) - self.retention
        expired = [job_id for job_id, job in self._jobs.items() if job.created_at < cutoff]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            logger.debug("Expired %d job(s) older than %s", len(expired), cutoff.isoformat())
        return len(expired)

    async def start(self) -> None:
        if self._scheduler is not None:
            return
        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            func=self.sweep,
            trigger=IntervalTrigger(seconds=self.sweep_interval_seconds),
            id="expire_jobs",
            name="Expire in-memory jobs",
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(
            "Job sweeper started - checking every %d seconds, retaining %d seconds",
            self.sweep_interval_seconds,
            int(self.retention.total_seconds()),
        )

    async def close(self) -> None:
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

    def __len__(self) -> int:
        return len(self._jobs)
