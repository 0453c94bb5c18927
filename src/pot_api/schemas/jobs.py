"""Job record schemas."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

Tier = Literal["basic", "pro"]


class JobStatus(str, Enum):
    """Job status states."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


TERMINAL_STATUSES = frozenset({JobStatus.DONE, JobStatus.ERROR})

# Fields fixed at creation time.
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "input"})


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobInput(CamelModel):
    """What the caller submitted; never changes after creation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    output: str
    question: str
    tier: Tier = "basic"
    callback_url: Optional[str] = None


class Job(CamelModel):
    """One unit of asynchronous verification work."""

    id: str
    status: JobStatus
    created_at: datetime
    updated_at: datetime
    input: JobInput
    result: Optional[Any] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_outcome(self) -> "Job":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not precede created_at")
        if self.result is not None and self.status != JobStatus.DONE:
            raise ValueError(f"result is only allowed on done jobs, got status {self.status.value}")
        if self.error is not None and self.status != JobStatus.ERROR:
            raise ValueError(f"error is only allowed on failed jobs, got status {self.status.value}")
        if self.status == JobStatus.DONE and self.result is None:
            raise ValueError("done jobs require a result")
        if self.status == JobStatus.ERROR and not self.error:
            raise ValueError("failed jobs require an error message")
        return self

    @classmethod
    def new(cls, job_input: JobInput, now: datetime) -> "Job":
        return cls(
            id=str(uuid.uuid4()),
            status=JobStatus.PENDING,
            created_at=now,
            updated_at=now,
            input=job_input,
        )

    def merge(self, now: datetime, **fields: Any) -> "Job":
        """Return a validated copy with ``fields`` applied and ``updated_at`` refreshed."""
        frozen = IMMUTABLE_FIELDS.intersection(fields)
        if frozen:
            raise ValueError(f"Cannot update immutable job fields: {sorted(frozen)}")

        data = self.model_dump()
        data.update(fields)
        data["updated_at"] = max(now, self.created_at)
        return Job.model_validate(data)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class WebhookPayload(CamelModel):
    """Body POSTed to a caller's callback URL once a job is terminal."""

    job_id: str
    status: JobStatus
    result: Optional[Any] = None
    error: Optional[str] = None
