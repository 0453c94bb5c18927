from typing import Any, Dict, Optional, Protocol

import httpx

from pot_api.schemas.jobs import Tier


class VerificationError(Exception):
    pass


class Verifier(Protocol):
    async def verify(self, output: str, *, tier: Tier, api_keys: Dict[str, str], question: str) -> Any: ...


def _upstream_message(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        for key in ("error", "detail", "message"):
            value = data.get(key)
            if isinstance(value, dict):
                value = value.get("message")
            if isinstance(value, str) and value.strip():
                return value
    return None


class HttpVerifier:
    """Client for the verification engine's HTTP API.

    The engine decides how long a verification takes; no timeout is applied.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @classmethod
    def from_url(cls, base_url: str) -> "HttpVerifier":
        return cls(httpx.AsyncClient(base_url=base_url, timeout=None))

    async def verify(self, output: str, *, tier: Tier, api_keys: Dict[str, str], question: str) -> Any:
        payload = {"output": output, "question": question, "tier": tier, "apiKeys": api_keys}
        try:
            response = await self.client.post("verify", json=payload)
        except httpx.RequestError as e:
            raise VerificationError(f"Verification engine unavailable: {e}") from e

        if response.status_code >= 400:
            message = _upstream_message(response)
            raise VerificationError(message or f"Verification engine returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise VerificationError("Verification engine returned invalid JSON") from e

    async def aclose(self) -> None:
        await self.client.aclose()
