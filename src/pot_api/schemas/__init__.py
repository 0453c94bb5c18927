from pot_api.schemas.jobs import TERMINAL_STATUSES, Job, JobInput, JobStatus, Tier, WebhookPayload

__all__ = [
    "TERMINAL_STATUSES",
    "Job",
    "JobInput",
    "JobStatus",
    "Tier",
    "WebhookPayload",
]
