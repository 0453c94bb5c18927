from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol

from pot_api.schemas.jobs import Job, JobInput

Clock = Callable[[], datetime]


def current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


class QueueBackend(Protocol):
    """Storage for job records. Both implementations behave identically to callers."""

    name: str

    async def create_job(self, job_input: JobInput) -> Job: ...

    async def get_job(self, job_id: str) -> Optional[Job]: ...

    async def update_job(self, job_id: str, **fields: Any) -> None: ...

    async def start(self) -> None: ...

    async def close(self) -> None: ...
