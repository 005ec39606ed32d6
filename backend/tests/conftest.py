"""Shared pytest fixtures for the ElGamal client test suite."""

import asyncio
from typing import Callable, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from elgamal_client.crypto.elgamal import encrypt
from elgamal_client.crypto.randomness import SecretSampler
from elgamal_client.errors import RequestFailed
from elgamal_client.main import app, get_client, get_result_log
from elgamal_client.models import EncryptRequest, EncryptResponse
from elgamal_client.protocol import ElGamalClient
from elgamal_client.transport import ResultLog


class FakeEncryptService:
    """In-process encryption service that records what it was asked and what it encrypted."""

    name = "fake_service"

    def __init__(self, p: int, a: int, plaintexts=(42, 7, 100, 1, 466, 3, 9)):
        self.p = p
        self.a = a
        self.ready = True
        self.fail_next = False
        self.gate: Optional[asyncio.Event] = None
        self.respond: Optional[Callable[[int], EncryptResponse]] = None
        self.requests: list[int] = []
        self.sent: list[int] = []
        self._plaintexts = list(plaintexts)

    async def wait_for_service(self, timeout: float) -> bool:
        return self.ready

    async def encrypt(self, request: EncryptRequest) -> EncryptResponse:
        self.requests.append(request.public_key)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_next:
            self.fail_next = False
            raise RequestFailed("request rejected")
        if self.respond is not None:
            return self.respond(request.public_key)
        m = self._plaintexts[len(self.sent) % len(self._plaintexts)] % self.p
        y1, y2 = encrypt(self.p, self.a, request.public_key, m)
        self.sent.append(m)
        return EncryptResponse(y1=y1, y2=y2)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def result_log():
    return ResultLog()


@pytest.fixture()
def fake_service():
    return FakeEncryptService(p=467, a=2)


@pytest.fixture()
def elgamal(fake_service, result_log):
    """A protocol client wired to the fake service with a fixed seed."""
    return ElGamalClient(fake_service, [], result_log=result_log, sampler=SecretSampler(seed=1234))


@pytest.fixture()
async def client(elgamal, result_log):
    """Provide an async HTTP test client bound to the FastAPI app."""
    app.dependency_overrides[get_client] = lambda: elgamal
    app.dependency_overrides[get_result_log] = lambda: result_log
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
