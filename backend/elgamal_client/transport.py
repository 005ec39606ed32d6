"""
Boundary adapters: the encrypt exchange with the remote service and the
result publishers. The state machine only sees the two Protocol types.
"""

import asyncio
import logging
from typing import List, Optional, Protocol

import httpx
from pydantic import ValidationError

from elgamal_client.errors import RequestFailed
from elgamal_client.models import DecryptedResult, EncryptRequest, EncryptResponse

logger = logging.getLogger(__name__)

PROBE_INTERVAL = 0.1


class EncryptService(Protocol):
    name: str

    async def wait_for_service(self, timeout: float) -> bool: ...

    async def encrypt(self, request: EncryptRequest) -> EncryptResponse: ...


class ResultPublisher(Protocol):
    async def publish(self, result: DecryptedResult) -> None: ...


class HttpEncryptService:
    """Talks to an encryption service exposing GET /health and POST /encrypt."""

    def __init__(
        self,
        base_url: str,
        *,
        name: str = "elgamal_service",
        request_timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.name = name
        self.request_timeout = request_timeout
        self._client = client

    def _new_client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def _get(self, path: str, timeout: float) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(f"{self.base_url}{path}", timeout=timeout)
        async with self._new_client(timeout) as client:
            return await client.get(path)

    async def _post(self, path: str, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(f"{self.base_url}{path}", json=payload, timeout=self.request_timeout)
        async with self._new_client(self.request_timeout) as client:
            return await client.post(path, json=payload)

    async def wait_for_service(self, timeout: float) -> bool:
        """Poll /health until it answers 200 or the timeout elapses."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            remaining = deadline - loop.time()
            try:
                response = await self._get("/health", timeout=max(remaining, 0.01))
                if response.status_code == 200:
                    return True
            except httpx.HTTPError as exc:
                logger.debug(f"Readiness probe for {self.name} failed: {exc}")
            remaining = deadline - loop.time()
            if remaining <= 0:
                return False
            await asyncio.sleep(min(PROBE_INTERVAL, remaining))

    async def encrypt(self, request: EncryptRequest) -> EncryptResponse:
        try:
            response = await self._post("/encrypt", request.model_dump())
            response.raise_for_status()
            return EncryptResponse.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise RequestFailed(f"{self.name} call failed: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            raise RequestFailed(f"{self.name} returned an invalid payload: {exc}") from exc


class ResultLog:
    """Keeps every published result in memory, in publication order."""

    def __init__(self):
        self._results: List[DecryptedResult] = []

    async def publish(self, result: DecryptedResult) -> None:
        self._results.append(result)

    @property
    def values(self) -> List[int]:
        return [r.data for r in self._results]

    def clear(self) -> None:
        self._results.clear()


class WebhookPublisher:
    """POSTs each result as {"data": <int64>} to a subscriber URL."""

    def __init__(self, url: str, *, timeout: float = 5.0, client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def publish(self, result: DecryptedResult) -> None:
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=result.model_dump(), timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=result.model_dump())
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RequestFailed(f"publishing result to {self.url} failed: {exc}") from exc
