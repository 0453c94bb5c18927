import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from pot_api import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class WebhookClient:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def deliver(self, url: str, payload: Dict[str, Any]) -> bool:
        """POST a job notification to a caller-supplied URL.

        Exactly one attempt is made. Failures are logged and swallowed.

        Args:
            url: Callback URL given at job creation
            payload: JSON body, e.g. {"jobId": ..., "status": "done", "result": ...}

        Returns:
            True when the receiver answered with a 2xx status.
        """
        try:
            # httpx timeouts apply per phase; wait_for caps the delivery as a whole.
            await asyncio.wait_for(self._post(url, payload), self.timeout)
        except httpx.HTTPStatusError as e:
            logger.warning("Webhook delivery to %s failed with status %d", url, e.response.status_code)
            return False
        except Exception as e:
            logger.warning("Webhook delivery failed for %s: %r", url, e)
            return False
        return True

    async def _post(self, url: str, payload: Dict[str, Any]) -> None:
        headers = {"User-Agent": f"pot-api/{__version__}"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
