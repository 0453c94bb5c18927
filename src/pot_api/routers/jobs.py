from fastapi import APIRouter, Depends, HTTPException, Response

from pot_api.dependencies import get_queue
from pot_api.queues.facade import JobQueue
from pot_api.schemas.jobs import Job

router = APIRouter(tags=["jobs"])

RETRY_AFTER_SECONDS = "5"


@router.get("/jobs/{job_id}", response_model=Job, response_model_exclude_none=True)
async def get_job(job_id: str, response: Response, queue: JobQueue = Depends(get_queue)) -> Job:
    """Get the current state of an async verification job."""
    job = await queue.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if not job.is_terminal:
        response.headers["Retry-After"] = RETRY_AFTER_SECONDS
    return job
