import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from elgamal_client.crypto.elgamal import decrypt, public_value
from elgamal_client.errors import RequestFailed
from elgamal_client.models import DecryptedResult, EncryptRequest
from elgamal_client.stub_service import app as stub_app, encryptor
from elgamal_client.transport import HttpEncryptService, WebhookPublisher

SERVICE_URL = "http://elgamal-service"


def mock_client(handler) -> AsyncClient:
    return AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_encrypt_against_stub_service():
    encryptor.plaintexts.clear()
    p, a = encryptor.params.p, encryptor.params.a
    n = 101

    async with AsyncClient(transport=ASGITransport(app=stub_app)) as client:
        service = HttpEncryptService(SERVICE_URL, client=client)
        assert await service.wait_for_service(1.0) is True
        response = await service.encrypt(EncryptRequest(public_key=public_value(p, a, n)))

    assert decrypt(p, n, response.y1, response.y2) == encryptor.plaintexts[-1]


@pytest.mark.anyio
async def test_readiness_probe_times_out_on_unhealthy_service():
    async with mock_client(lambda request: httpx.Response(503)) as client:
        service = HttpEncryptService(SERVICE_URL, client=client)
        assert await service.wait_for_service(0.2) is False


@pytest.mark.anyio
async def test_readiness_probe_survives_connection_errors():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(refuse) as client:
        service = HttpEncryptService(SERVICE_URL, client=client)
        assert await service.wait_for_service(0.2) is False


@pytest.mark.anyio
async def test_rejected_request_raises_request_failed():
    async with mock_client(lambda request: httpx.Response(500, json={"detail": "boom"})) as client:
        service = HttpEncryptService(SERVICE_URL, client=client)
        with pytest.raises(RequestFailed):
            await service.encrypt(EncryptRequest(public_key=5))


@pytest.mark.anyio
async def test_malformed_response_raises_request_failed():
    async with mock_client(lambda request: httpx.Response(200, json={"y1": -1})) as client:
        service = HttpEncryptService(SERVICE_URL, client=client)
        with pytest.raises(RequestFailed):
            await service.encrypt(EncryptRequest(public_key=5))


@pytest.mark.anyio
async def test_stub_rejects_out_of_range_public_key():
    async with AsyncClient(transport=ASGITransport(app=stub_app)) as client:
        service = HttpEncryptService(SERVICE_URL, client=client)
        with pytest.raises(RequestFailed):
            await service.encrypt(EncryptRequest(public_key=0))


@pytest.mark.anyio
async def test_webhook_posts_signed_result():
    received = []

    def handler(request):
        received.append((str(request.url), json.loads(request.read())))
        return httpx.Response(204)

    async with mock_client(handler) as client:
        publisher = WebhookPublisher("http://subscriber/elgamal_result", client=client)
        await publisher.publish(DecryptedResult(data=-7))

    assert received == [("http://subscriber/elgamal_result", {"data": -7})]


@pytest.mark.anyio
async def test_webhook_failure_raises_request_failed():
    async with mock_client(lambda request: httpx.Response(502)) as client:
        publisher = WebhookPublisher("http://subscriber/elgamal_result", client=client)
        with pytest.raises(RequestFailed):
            await publisher.publish(DecryptedResult(data=1))
