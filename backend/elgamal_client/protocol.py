"""
Round protocol for the ElGamal exchange.

One client instance owns the round counter, the pending round and the
random generator. Both entry points (parameter notification and the
encrypt response continuation) run under the same lock, so a round is
never started while another is pending.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from elgamal_client.config import DEFAULT_TOTAL_ROUNDS
from elgamal_client.crypto.elgamal import decrypt, public_value
from elgamal_client.crypto.modular import to_int64
from elgamal_client.crypto.randomness import SecretSampler
from elgamal_client.errors import ElGamalClientError, InvalidParameters, ServiceUnavailable
from elgamal_client.models import (
    DecryptedResult,
    DomainParameters,
    EncryptRequest,
    EncryptResponse,
    NodeStatus,
)
from elgamal_client.transport import EncryptService, ResultLog, ResultPublisher

logger = logging.getLogger(__name__)


class RoundPhase(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    COMPLETE = "complete"


class ParamsOutcome(str, Enum):
    DISPATCHED = "dispatched"
    IGNORED_IN_FLIGHT = "ignored_in_flight"
    IGNORED_COMPLETE = "ignored_complete"
    INVALID_PARAMETERS = "invalid_parameters"
    SERVICE_UNAVAILABLE = "service_unavailable"


@dataclass(frozen=True)
class PendingRound:
    """Context captured when a request is dispatched, consumed by its response."""
    round_number: int
    p: int
    a: int
    n: int
    public_key: int


@dataclass
class RoundState:
    round_index: int = 0
    finished: bool = False
    pending: Optional[PendingRound] = None

    @property
    def in_flight(self) -> bool:
        return self.pending is not None


class ElGamalClient:
    def __init__(
        self,
        service: EncryptService,
        publishers: Sequence[ResultPublisher],
        *,
        total_rounds: int = DEFAULT_TOTAL_ROUNDS,
        service_timeout: float = 1.0,
        sampler: Optional[SecretSampler] = None,
        result_log: Optional[ResultLog] = None,
    ):
        """
        Every publisher must accept a result before its round counts. result_log
        only ever receives results of counted rounds.
        """
        if total_rounds < 1:
            raise ValueError("total_rounds must be at least 1")
        self._service = service
        self._publishers = list(publishers)
        self._result_log = result_log
        self.total_rounds = total_rounds
        self.service_timeout = service_timeout
        self._sampler = sampler or SecretSampler()
        self._state = RoundState()
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        logger.info(f"ElGamal client started ({total_rounds} rounds, service {service.name}).")

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def phase(self) -> RoundPhase:
        if self._state.finished:
            return RoundPhase.COMPLETE
        if self._state.in_flight:
            return RoundPhase.AWAITING_RESPONSE
        return RoundPhase.IDLE

    def status(self) -> NodeStatus:
        return NodeStatus(
            state=self.phase.value,
            round_index=self._state.round_index,
            total_rounds=self.total_rounds,
            in_flight=self._state.in_flight,
            finished=self._state.finished,
        )

    async def on_params(self, params: DomainParameters) -> ParamsOutcome:
        """Handle one parameter notification; starts a round when idle."""
        async with self._lock:
            if self._state.finished:
                return ParamsOutcome.IGNORED_COMPLETE
            if self._state.in_flight:
                return ParamsOutcome.IGNORED_IN_FLIGHT

            try:
                pending = await self._prepare_round(params)
            except InvalidParameters as exc:
                logger.error(str(exc))
                return ParamsOutcome.INVALID_PARAMETERS
            except ServiceUnavailable as exc:
                logger.warning(str(exc))
                return ParamsOutcome.SERVICE_UNAVAILABLE

            self._state.pending = pending
            logger.info(
                f"[Round {pending.round_number}] p={pending.p} a={pending.a} n={pending.n} "
                f"b={pending.public_key}, calling {self._service.name}"
            )
            self._task = asyncio.create_task(self._exchange(pending))
            return ParamsOutcome.DISPATCHED

    async def _prepare_round(self, params: DomainParameters) -> PendingRound:
        p, a = params.p, params.a
        if p < 3:
            raise InvalidParameters(p)

        n = self._sampler.secret_exponent(p)
        b = public_value(p, a, n)

        if not await self._service.wait_for_service(self.service_timeout):
            raise ServiceUnavailable(self._service.name, self.service_timeout)

        return PendingRound(round_number=self._state.round_index + 1, p=p, a=a, n=n, public_key=b)

    async def _exchange(self, pending: PendingRound) -> None:
        try:
            response = await self._service.encrypt(EncryptRequest(public_key=pending.public_key))
        except Exception as exc:
            await self._abandon(pending)
            logger.error(f"Service call failed: {exc}")
            return

        async with self._lock:
            try:
                await self._finish_round(pending, response)
            except ElGamalClientError as exc:
                self._release(pending)
                logger.error(f"[Round {pending.round_number}] publishing result failed: {exc}")
            except Exception as exc:
                self._release(pending)
                logger.error(f"[Round {pending.round_number}] handling response failed: {exc}")

    async def _abandon(self, pending: PendingRound) -> None:
        async with self._lock:
            self._release(pending)

    def _release(self, pending: PendingRound) -> None:
        if self._state.pending is pending:
            self._state.pending = None

    async def _finish_round(self, pending: PendingRound, response: EncryptResponse) -> None:
        if self._state.pending is not pending:
            logger.warning(f"Dropping response for stale round {pending.round_number}")
            return

        x = decrypt(pending.p, pending.n, response.y1, response.y2)
        result = DecryptedResult(data=to_int64(x))
        for publisher in self._publishers:
            await publisher.publish(result)

        self._state.round_index += 1
        self._state.pending = None
        if self._result_log is not None:
            await self._result_log.publish(result)
        logger.info(
            f"[Round {self._state.round_index}] y1={response.y1} y2={response.y2} -> x={x} (published)"
        )

        if self._state.round_index >= self.total_rounds:
            self._state.finished = True
            logger.info(f"Task complete: {self.total_rounds} rounds finished.")

    async def wait_for_exchange(self) -> None:
        """Wait until the outstanding encrypt exchange, if any, has been handled."""
        task = self._task
        if task is not None and not task.done():
            await task

    async def close(self) -> None:
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._task = None
