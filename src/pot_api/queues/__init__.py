from pot_api.queues.backend import QueueBackend, current_timestamp
from pot_api.queues.facade import JobQueue, create_queue
from pot_api.queues.memory import InMemoryBackend
from pot_api.queues.redis_store import RedisBackend

__all__ = [
    "InMemoryBackend",
    "JobQueue",
    "QueueBackend",
    "RedisBackend",
    "create_queue",
    "current_timestamp",
]
