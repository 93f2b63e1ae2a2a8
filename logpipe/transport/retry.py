"""Bounded retry with exponential backoff around a BaseTransport."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from logpipe.logging.logger import Log
from logpipe.transport.base import BaseTransport
from logpipe.transport.exceptions import ServiceError, TransientTransportError
from logpipe.transport.models import RequestEnvelope
from logpipe.transport.strategy import TransportStrategy

Sleep = Callable[[float], Awaitable[None]]
AttemptListener = Callable[[int], None]


@dataclass(frozen=True)
class RetryPolicy:
    """``max_retries`` additional attempts after the first, delays in seconds."""

    max_retries: int = 3
    base_delay_seconds: float = 1.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("RetryPolicy.max_retries must not be negative")
        if self.base_delay_seconds < 0:
            raise ValueError("RetryPolicy.base_delay_seconds must not be negative")
        if self.multiplier < 1:
            raise ValueError("RetryPolicy.multiplier must be at least 1")


@dataclass(slots=True)
class RetryState:
    attempt: int
    next_delay: float

    @classmethod
    def start(cls, policy: RetryPolicy) -> "RetryState":
        return cls(attempt=0, next_delay=policy.base_delay_seconds)

    def exhausted(self, policy: RetryPolicy) -> bool:
        return self.attempt > policy.max_retries

    def back_off(self, policy: RetryPolicy) -> float:
        """Return the delay to wait now and grow the next one."""
        delay = self.next_delay
        self.next_delay = delay * policy.multiplier
        return delay


class RetryingTransport:
    """Retry transient failures of a buffered request with growing delays.

    Only TransientTransportError is retried. Every other PipelineError
    (service rejections, the empty-input sentinel) propagates on the first
    attempt. When retries run out on an HTTP error status, the last answer
    surfaces as a ServiceError; network-level failures stay transient. The
    endpoint is assumed idempotent: retries resend the same envelope and
    carry no deduplication key.
    """

    def __init__(
        self,
        transport: BaseTransport,
        policy: RetryPolicy,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._transport = transport
        self._policy = policy
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def send(
        self,
        envelope: RequestEnvelope,
        on_attempt: AttemptListener | None = None,
    ) -> httpx.Response:
        """Return a successful response whose body has not been read yet.

        Failures while the caller later reads the body are not retried here.
        """
        return await self._with_retries(
            envelope, lambda: self._transport.open(envelope), on_attempt
        )

    async def fetch(
        self,
        envelope: RequestEnvelope,
        on_attempt: AttemptListener | None = None,
    ) -> httpx.Response:
        """Return a successful response with its body fully read.

        The body is read inside the attempt, so a connection dropped while
        reading counts as a transient failure and is retried.
        """

        async def attempt() -> httpx.Response:
            response = await self._transport.open(envelope)
            try:
                await response.aread()
            except httpx.TransportError as exc:
                raise TransientTransportError(
                    "Connection lost while reading the response"
                ) from exc
            finally:
                await response.aclose()
            return response

        return await self._with_retries(envelope, attempt, on_attempt)

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _with_retries(
        self,
        envelope: RequestEnvelope,
        attempt: Callable[[], Awaitable[httpx.Response]],
        on_attempt: AttemptListener | None,
    ) -> httpx.Response:
        if envelope.strategy is not TransportStrategy.BUFFERED:
            raise ValueError("Only buffered envelopes go through the retrying transport")

        state = RetryState.start(self._policy)
        while True:
            state.attempt += 1
            if on_attempt is not None:
                on_attempt(state.attempt)
            try:
                response = await attempt()
            except TransientTransportError as exc:
                if state.exhausted(self._policy):
                    Log.error(
                        f"{envelope.method} {envelope.url} failed after "
                        f"{state.attempt} attempts: {exc}"
                    )
                    if exc.status_code is not None:
                        raise ServiceError(
                            exc.service_message, status_code=exc.status_code
                        ) from exc
                    raise
                delay = state.back_off(self._policy)
                Log.warning(
                    f"Attempt {state.attempt} of {envelope.method} {envelope.url} failed "
                    f"({exc}), retrying in {delay:.2f}s"
                )
                await self._sleep(delay)
                continue
            if state.attempt > 1:
                Log.info(f"{envelope.method} {envelope.url} succeeded on attempt {state.attempt}")
            return response
