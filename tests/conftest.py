from collections.abc import AsyncIterator, Callable

import httpx
import pytest

from logpipe.artifacts.memory_platform import MemoryPlatform
from logpipe.transport.base import BaseTransport
from logpipe.transport.models import RequestEnvelope


class RecordingSleep:
    """Stands in for asyncio.sleep and records the requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ScriptedTransport(BaseTransport):
    """Plays back one scripted step per attempt; the last step repeats forever."""

    def __init__(self, *steps: httpx.Response | Exception) -> None:
        self._steps = list(steps)
        self.envelopes: list[RequestEnvelope] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.envelopes)

    async def open(self, envelope: RequestEnvelope) -> httpx.Response:
        self.envelopes.append(envelope)
        step = self._steps.pop(0) if len(self._steps) > 1 else self._steps[0]
        if isinstance(step, Exception):
            raise step
        return step

    async def aclose(self) -> None:
        self.closed = True


def stream_body(chunks: list[bytes], error: Exception | None = None) -> AsyncIterator[bytes]:
    """Async body for httpx.Response that yields ``chunks`` and optionally fails afterwards."""

    async def body() -> AsyncIterator[bytes]:
        for chunk in chunks:
            yield chunk
        if error is not None:
            raise error

    return body()


@pytest.fixture()
def memory_platform() -> MemoryPlatform:
    return MemoryPlatform()


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def make_transport() -> Callable[..., ScriptedTransport]:
    return ScriptedTransport


@pytest.fixture()
def streamed() -> Callable[..., AsyncIterator[bytes]]:
    return stream_body
