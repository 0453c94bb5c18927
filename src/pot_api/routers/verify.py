import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from pot_api.credentials import ApiKeys, build_api_key_record, resolve_keys, validate_config
from pot_api.dependencies import get_queue, get_runner, get_settings, get_verifier
from pot_api.queues.facade import JobQueue
from pot_api.schemas.verify import AsyncVerifyRequest, AsyncVerifyResponse, VerifyRequest
from pot_api.services.runner import JobRunner
from pot_api.services.verifier import VerificationError, Verifier
from pot_api.settings import Settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["verify"])


def _checked_keys(body: VerifyRequest, settings: Settings) -> ApiKeys:
    if body.missing_fields():
        raise HTTPException(status_code=400, detail="output and question are required")

    keys = resolve_keys(body.api_keys, settings)
    config_error = validate_config(keys)
    if config_error:
        raise HTTPException(status_code=400, detail=config_error)
    return keys


@router.post("/verify")
async def verify(
    body: VerifyRequest,
    settings: Settings = Depends(get_settings),
    verifier: Verifier = Depends(get_verifier),
) -> Any:
    """Verify synchronously and return the engine's result."""
    keys = _checked_keys(body, settings)
    try:
        return await verifier.verify(
            body.output or "",
            tier=body.tier,
            api_keys=build_api_key_record(keys),
            question=body.question or "",
        )
    except VerificationError as e:
        logger.warning("Verification failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/verify/async",
    status_code=202,
    response_model=AsyncVerifyResponse,
    response_model_by_alias=True,
)
async def verify_async(
    body: AsyncVerifyRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    queue: JobQueue = Depends(get_queue),
    runner: JobRunner = Depends(get_runner),
) -> AsyncVerifyResponse:
    """Queue a verification and return a handle to poll."""
    keys = _checked_keys(body, settings)

    job = await queue.create_job(body.to_job_input())
    runner.spawn(job.id, job.input, build_api_key_record(keys))

    poll_url = f"/jobs/{job.id}"
    response.headers["Location"] = poll_url
    return AsyncVerifyResponse(job_id=job.id, poll_url=poll_url)
