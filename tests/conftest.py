import asyncio
import time
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from pot_api.app import create_app
from pot_api.settings import Settings
from pot_api.webhook import WebhookClient

DEFAULT_RESULT = {"verdict": "verified", "confidence": 0.92, "flags": []}


class DummyVerifier:
    def __init__(self, result: Any = None, error: Optional[Exception] = None) -> None:
        self.result = DEFAULT_RESULT if result is None else result
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[Dict[str, Any]] = []

    async def verify(self, output: str, *, tier: str, api_keys: Dict[str, str], question: str) -> Any:
        self.calls.append({"output": output, "tier": tier, "api_keys": api_keys, "question": question})
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


class DummyRedis:
    """Just enough of ``redis.asyncio.Redis`` for the job store."""

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}
        self.set_calls = 0
        self.pings = 0
        self.fail = False
        self.closed = False
        self.ping_gate: Optional[asyncio.Event] = None

    def _check(self) -> None:
        if self.fail:
            raise RedisConnectionError("Connection refused")

    async def ping(self) -> bool:
        self.pings += 1
        if self.ping_gate is not None:
            await self.ping_gate.wait()
        self._check()
        return True

    async def get(self, key: str) -> Optional[str]:
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self._check()
        self.set_calls += 1
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "redis_url": None,
        "anthropic_api_key": "sk-ant-test",
        "xai_api_key": None,
        "deepseek_api_key": None,
        "moonshot_api_key": None,
        "max_concurrent_jobs": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def verifier() -> DummyVerifier:
    return DummyVerifier()


@pytest.fixture
def webhook_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def webhooks(webhook_requests: List[httpx.Request]) -> WebhookClient:
    def handler(request: httpx.Request) -> httpx.Response:
        webhook_requests.append(request)
        if request.url.host == "unreachable.invalid":
            raise httpx.ConnectError("Name or service not known", request=request)
        return httpx.Response(204)

    return WebhookClient(transport=httpx.MockTransport(handler))


@contextmanager
def build_client(
    settings: Settings, verifier: DummyVerifier, webhooks: WebhookClient
) -> Generator[TestClient, None, None]:
    app = create_app(settings=settings, verifier=verifier, webhooks=webhooks)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client(settings: Settings, verifier: DummyVerifier, webhooks: WebhookClient) -> Generator[TestClient, None, None]:
    with build_client(settings, verifier, webhooks) as test_client:
        yield test_client


def wait_for_terminal(client: TestClient, job_id: str, timeout: float = 5.0) -> Dict[str, Any]:
    deadline = time.monotonic() + timeout
    while True:
        job = client.get(f"/jobs/{job_id}").json()
        if job["status"] in ("done", "error"):
            return job
        if time.monotonic() > deadline:
            raise AssertionError(f"Job {job_id} stuck in {job['status']}")
        time.sleep(0.01)
