"""Request and response bodies for the verify endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pot_api.credentials import ApiKeys
from pot_api.schemas.jobs import JobInput, JobStatus, Tier


class VerifyRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Emptiness is checked by the router so callers get a 400, not a 422.
    output: Optional[str] = None
    question: Optional[str] = None
    tier: Tier = "basic"
    api_keys: Optional[ApiKeys] = None

    def missing_fields(self) -> bool:
        return not self.output or not self.question


class AsyncVerifyRequest(VerifyRequest):
    callback_url: Optional[str] = None

    def to_job_input(self) -> JobInput:
        return JobInput(
            output=self.output or "",
            question=self.question or "",
            tier=self.tier,
            callback_url=self.callback_url,
        )


class AsyncVerifyResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    job_id: str
    status: JobStatus = JobStatus.PENDING
    poll_url: str
