"""Single entry point for job storage, whichever backend is active."""

import logging
from typing import Any, Optional

from pot_api.queues.backend import QueueBackend
from pot_api.queues.memory import InMemoryBackend
from pot_api.queues.redis_store import RedisBackend
from pot_api.schemas.jobs import Job, JobInput
from pot_api.settings import Settings

logger = logging.getLogger(__name__)


class JobQueue:
    def __init__(self, backend: QueueBackend):
        self.backend = backend

    @property
    def backend_name(self) -> str:
        return self.backend.name

    async def create_job(self, job_input: JobInput) -> Job:
        job = await self.backend.create_job(job_input)
        logger.info("Job %s created (tier=%s)", job.id, job.input.tier)
        return job

    async def get_job(self, job_id: str) -> Optional[Job]:
        return await self.backend.get_job(job_id)

    async def update_job(self, job_id: str, **fields: Any) -> None:
        await self.backend.update_job(job_id, **fields)

    async def start(self) -> None:
        await self.backend.start()

    async def close(self) -> None:
        await self.backend.close()


def create_queue(settings: Settings) -> JobQueue:
    """Pick the backend once, at application start."""
    backend: QueueBackend
    if settings.redis_url:
        backend = RedisBackend.from_url(
            settings.redis_url,
            key_prefix=settings.redis_key_prefix,
            ttl_seconds=settings.job_ttl_seconds,
        )
    else:
        backend = InMemoryBackend(
            retention_seconds=settings.job_retention_seconds,
            sweep_interval_seconds=settings.sweep_interval_seconds,
        )
        logger.info("Using in-memory job backend")
    return JobQueue(backend)
