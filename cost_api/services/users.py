"""
Client for the external users service.

The users service exposes ``GET <base>/exists/<id>`` answering
``{"exists": true}`` or ``{"exists": false}``. Anything else (a non-2xx
status, a body that is not that shape, a transport failure or a timeout) is
reported as UpstreamUnavailable so callers never mistake a broken directory
for a missing user.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
from loguru import logger

from cost_api.core.errors import UpstreamUnavailable
from cost_api.services.base import UserDirectory

DEFAULT_TIMEOUT = 5.0  # seconds


class HttpUserDirectory(UserDirectory):
    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: Base URL of the users service, e.g. ``http://users:8000/api/users``
            timeout: Bound in seconds for the whole exists call
            transport: Optional httpx transport, used by tests to stub the service
        """
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _get_endpoint(self, owner_id: int) -> str:
        return f"{self.base_url}/exists/{owner_id}"

    async def exists(self, owner_id: int) -> bool:
        if not self.base_url:
            raise UpstreamUnavailable("USER_SERVICE_URL is not configured")

        url = self._get_endpoint(owner_id)
        start_time = time.perf_counter()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await asyncio.wait_for(
                    client.get(url, headers={"Accept": "application/json"}),
                    timeout=self.timeout,
                )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.warning("Users service timed out", owner_id=owner_id, timeout=self.timeout)
            raise UpstreamUnavailable(
                f"Users service timed out after {self.timeout}s"
            ) from e
        except httpx.RequestError as e:
            logger.warning("Users service unreachable", owner_id=owner_id, error=str(e))
            raise UpstreamUnavailable(f"Users service unreachable: {e}") from e

        latency_ms = (time.perf_counter() - start_time) * 1000

        if not response.is_success:
            logger.warning(
                "Users service returned error status",
                owner_id=owner_id,
                status_code=response.status_code,
                response=response.text[:200],
            )
            raise UpstreamUnavailable(
                f"Users service error: HTTP {response.status_code}. {response.text[:200]}".strip(),
                upstream_status=response.status_code,
            )

        exists = self._extract_exists(response)
        logger.debug(
            "Users service answered",
            owner_id=owner_id,
            exists=exists,
            latency_ms=round(latency_ms, 2),
        )
        return exists

    def _extract_exists(self, response: httpx.Response) -> bool:
        try:
            data: Any = response.json()
        except ValueError as e:
            raise UpstreamUnavailable("Users service returned a non-JSON body") from e

        exists = data.get("exists") if isinstance(data, dict) else None
        if not isinstance(exists, bool):
            raise UpstreamUnavailable(
                "Users service returned invalid response shape (expected { exists: boolean })"
            )
        return exists
