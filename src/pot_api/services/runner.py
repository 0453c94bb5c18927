import asyncio
import logging
from typing import Dict, Optional, Set

from pot_api.queues.facade import JobQueue
from pot_api.schemas.jobs import JobInput, JobStatus, WebhookPayload
from pot_api.services.verifier import VerificationError, Verifier
from pot_api.webhook import WebhookClient

logger = logging.getLogger(__name__)


def describe_error(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class JobRunner:
    """Runs each job in its own task, detached from the request that created it.

    With ``max_concurrent_jobs`` unset every job starts immediately. When set,
    extra jobs wait in ``pending`` until a slot frees up.
    """

    def __init__(
        self,
        queue: JobQueue,
        verifier: Verifier,
        webhooks: WebhookClient,
        max_concurrent_jobs: Optional[int] = None,
    ):
        self.queue = queue
        self.verifier = verifier
        self.webhooks = webhooks
        self._slots = asyncio.Semaphore(max_concurrent_jobs) if max_concurrent_jobs else None
        self._tasks: Set[asyncio.Task[None]] = set()

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def spawn(self, job_id: str, job_input: JobInput, api_keys: Dict[str, str]) -> asyncio.Task[None]:
        task = asyncio.create_task(self.run(job_id, job_input, api_keys), name=f"job-{job_id}")
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Job task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Job task %s crashed", task.get_name(), exc_info=exc)

    async def run(self, job_id: str, job_input: JobInput, api_keys: Dict[str, str]) -> None:
        if self._slots is None:
            await self._execute(job_id, job_input, api_keys)
            return
        async with self._slots:
            await self._execute(job_id, job_input, api_keys)

    async def _execute(self, job_id: str, job_input: JobInput, api_keys: Dict[str, str]) -> None:
        await self.queue.update_job(job_id, status=JobStatus.RUNNING)

        try:
            result = await self.verifier.verify(
                job_input.output,
                tier=job_input.tier,
                api_keys=api_keys,
                question=job_input.question,
            )
            if result is None:
                raise VerificationError("Verification engine returned no result")
        except Exception as e:
            payload = await self._fail(job_id, describe_error(e))
        else:
            try:
                await self.queue.update_job(job_id, status=JobStatus.DONE, result=result)
            except Exception as e:
                logger.exception("Could not store result for job %s", job_id)
                payload = await self._fail(job_id, f"Could not store result: {describe_error(e)}")
            else:
                logger.info("Job %s done", job_id)
                payload = WebhookPayload(job_id=job_id, status=JobStatus.DONE, result=result)

        if job_input.callback_url:
            await self.webhooks.deliver(
                job_input.callback_url,
                payload.model_dump(mode="json", by_alias=True, exclude_none=True),
            )

    async def _fail(self, job_id: str, error: str) -> WebhookPayload:
        logger.info("Job %s failed: %s", job_id, error)
        await self.queue.update_job(job_id, status=JobStatus.ERROR, error=error)
        return WebhookPayload(job_id=job_id, status=JobStatus.ERROR, error=error)

    async def drain(self, timeout: float) -> None:
        """Wait up to ``timeout`` seconds for outstanding jobs; leave the rest running."""
        if not self._tasks:
            return
        logger.info("Waiting for %d running job(s)", len(self._tasks))
        _, still_running = await asyncio.wait(set(self._tasks), timeout=timeout)
        if still_running:
            logger.warning("%d job(s) still running at shutdown", len(still_running))
