import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, Request, status

from elgamal_client.config import Settings, get_settings
from elgamal_client.models import DomainParameters, NodeStatus, ParamsAck
from elgamal_client.protocol import ElGamalClient
from elgamal_client.transport import HttpEncryptService, ResultLog, ResultPublisher, WebhookPublisher

logger = logging.getLogger(__name__)


def build_client(settings: Settings, result_log: ResultLog) -> ElGamalClient:
    service = HttpEncryptService(
        settings.service_url,
        name=settings.service_name,
        request_timeout=settings.request_timeout,
    )
    publishers: List[ResultPublisher] = []
    if settings.result_url:
        publishers.append(WebhookPublisher(settings.result_url))
    return ElGamalClient(
        service,
        publishers,
        total_rounds=settings.total_rounds,
        service_timeout=settings.service_timeout,
        result_log=result_log,
    )


def get_result_log(request: Request) -> ResultLog:
    return request.app.state.result_log


def get_client(request: Request) -> ElGamalClient:
    return request.app.state.elgamal


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.result_log = ResultLog()
    app.state.elgamal = build_client(get_settings(), app.state.result_log)
    yield
    await app.state.elgamal.close()


app = FastAPI(
    title="ElGamal Client",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.post("/elgamal_params", status_code=status.HTTP_202_ACCEPTED, response_model=ParamsAck)
async def receive_params(params: DomainParameters, client: ElGamalClient = Depends(get_client)):
    """Parameter notification intake. Repeated deliveries are expected."""
    outcome = await client.on_params(params)
    return ParamsAck(outcome=outcome.value, round_index=client.state.round_index)


@app.get("/status", response_model=NodeStatus)
async def node_status(client: ElGamalClient = Depends(get_client)):
    return client.status()


@app.get("/elgamal_result")
async def results(result_log: ResultLog = Depends(get_result_log)) -> dict:
    """Every decrypted value published so far, oldest first."""
    return {"results": result_log.values}
