import asyncio
import logging
import re
from contextlib import suppress
from typing import Any, Optional

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from pot_api.queues.backend import Clock, current_timestamp
from pot_api.schemas.jobs import Job, JobInput

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "pot-api:jobs"
DEFAULT_TTL_SECONDS = 24 * 60 * 60


def mask_url(url: str) -> str:
    return re.sub(r"://.*@", "://***@", url)


class RedisBackend:
    """Job store backed by Redis.

    Each job is one JSON value under ``<prefix>:<id>``. Every write sets the
    TTL again, so active jobs live longer than 24h after creation.

    Storage failures never reach the caller: reads degrade to ``None`` and
    writes are dropped after logging.
    """

    name = "redis"

    def __init__(
        self,
        client: Redis,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Clock = current_timestamp,
    ):
        self.client = client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._ready = asyncio.Event()
        self._handshake: Optional[asyncio.Task[None]] = None

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisBackend":
        logger.info("Using Redis backend: %s", mask_url(url))
        return cls(Redis.from_url(url, decode_responses=True), **kwargs)

    def key(self, job_id: str) -> str:
        return f"{self.key_prefix}:{job_id}"

    async def _connect(self) -> None:
        try:
            await self.client.ping()
            logger.info("Redis connection established")
        except (RedisError, OSError) as e:
            logger.error("Redis error: %s", e)
        finally:
            self._ready.set()

    async def wait_ready(self) -> None:
        if self._handshake is None:
            self._handshake = asyncio.create_task(self._connect())
        await self._ready.wait()

    async def create_job(self, job_input: JobInput) -> Job:
        await self.wait_ready()
        job = Job.new(job_input, self.clock())
        await self._write(job)
        return job

    async def get_job(self, job_id: str) -> Optional[Job]:
        await self.wait_ready()
        try:
            raw = await self.client.get(self.key(job_id))
        except RedisError as e:
            logger.error("Redis error reading job %s: %s", job_id, e)
            return None

        if not raw:
            return None
        try:
            return Job.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable job %s: %s", job_id, e)
            return None

    async def update_job(self, job_id: str, **fields: Any) -> None:
        job = await self.get_job(job_id)
        if job is None:
            logger.debug("Ignoring update for unknown job %s", job_id)
            return
        await self._write(job.merge(self.clock(), **fields))

    async def _write(self, job: Job) -> None:
        try:
            await self.client.set(self.key(job.id), job.to_json(), ex=self.ttl_seconds)
        except RedisError as e:
            logger.error("Redis error writing job %s: %s", job.id, e)

    async def start(self) -> None:
        if self._handshake is None:
            self._handshake = asyncio.create_task(self._connect())

    async def close(self) -> None:
        if self._handshake is not None and not self._handshake.done():
            self._handshake.cancel()
            with suppress(asyncio.CancelledError):
                await self._handshake
        await self.client.aclose()
