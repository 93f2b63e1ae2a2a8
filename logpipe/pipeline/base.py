"""State machine shared by every pipeline variant."""

import asyncio
from abc import ABC
from collections.abc import Awaitable, Callable
from pathlib import Path

import httpx

from logpipe.artifacts.base import BasePlatform
from logpipe.artifacts.exceptions import NoDownloadAvailableError
from logpipe.artifacts.manager import ArtifactManager
from logpipe.artifacts.models import DownloadHandle, HandleKind, ResponseArtifact
from logpipe.exceptions import GENERIC_FAILURE_MESSAGE, FailureReason, PipelineError
from logpipe.logging.logger import Log
from logpipe.pipeline.config import PipelineConfig
from logpipe.pipeline.state import Failed, Idle, PipelineState, StreamingResponse, Success, Uploading
from logpipe.streaming.exceptions import StreamInterruptedError
from logpipe.transport.base import BaseTransport
from logpipe.transport.models import RequestEnvelope
from logpipe.transport.retry import RetryingTransport, Sleep
from logpipe.transport.strategy import TransportStrategy

StateListener = Callable[[PipelineState], None]


class BasePipeline(ABC):
    """Sequences one submission at a time and publishes its state.

    Every submission, file selection and clear starts a new generation.
    Work belonging to an older generation may still finish in the
    background, but it can no longer change the state or publish a handle.
    """

    def __init__(
        self,
        config: PipelineConfig,
        transport: BaseTransport,
        platform: BasePlatform,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._transport = RetryingTransport(transport, config.retry_policy, sleep=sleep)
        self._platform = platform
        self._artifacts = ArtifactManager(platform, config.download_base_url)
        self._state: PipelineState = Idle()
        self._listeners: list[StateListener] = []
        self._generation = 0

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def config(self) -> PipelineConfig:
        return self._config

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for every state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        """Drop the current result and return to Idle.

        An in-flight request is not aborted; its result is discarded on arrival.
        """
        self._invalidate()
        self._set_state(Idle())

    async def download(self, destination: Path | None = None) -> Path:
        """Write the current artifact to ``destination`` and return the written path.

        ``destination`` may be a directory, in which case the artifact's
        suggested filename is used inside it.

        Raises:
            NoDownloadAvailableError: if the current state holds no download handle.
        """
        state = self._state
        if not isinstance(state, Success) or state.handle is None:
            raise NoDownloadAvailableError("No download is available.")
        handle = state.handle
        target = self._resolve_target(destination, handle)

        if handle.kind is HandleKind.LOCAL:
            content = self._artifacts.read(handle)
            await asyncio.to_thread(target.write_bytes, content)
        else:
            await self._fetch_remote(handle, target)
        Log.info(f"Downloaded {handle.filename} to {target}")
        return target

    async def aclose(self) -> None:
        """Revoke the live handle and release the transport and platform."""
        self._generation += 1
        self._artifacts.close()
        await self._transport.aclose()

    def _invalidate(self) -> int:
        self._generation += 1
        self._artifacts.clear()
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _set_state(self, state: PipelineState) -> None:
        self._state = state
        Log.debug(f"{self.__class__.__name__} -> {state}")
        for listener in list(self._listeners):
            listener(state)

    def _transition(self, generation: int, state: PipelineState) -> bool:
        if not self._is_current(generation):
            Log.debug(f"Ignoring stale transition to {state.__class__.__name__}")
            return False
        self._set_state(state)
        return True

    def _on_attempt(self, generation: int) -> Callable[[int], None]:
        return lambda attempt: self._transition(generation, Uploading(attempt))

    def _on_progress(self, generation: int) -> Callable[[int], None]:
        return lambda received: self._transition(generation, StreamingResponse(received))

    async def _run(
        self,
        generation: int,
        work: Callable[[], Awaitable[ResponseArtifact]],
    ) -> PipelineState:
        """Run one submission's work and settle the state for its generation."""
        try:
            artifact = await work()
            if not self._is_current(generation):
                Log.info("Discarding result of a superseded submission")
                return self._state
            handle = self._artifacts.publish(artifact)
        except PipelineError as exc:
            Log.warning(f"Submission failed ({exc.reason.value}): {exc.message}")
            self._transition(generation, Failed(reason=exc.reason, message=exc.message))
        except Exception as exc:
            Log.error(f"Unexpected error during submission: {exc!r}")
            self._transition(
                generation,
                Failed(reason=FailureReason.SERVICE_ERROR, message=GENERIC_FAILURE_MESSAGE),
            )
        else:
            self._set_state(Success(artifact=artifact, handle=handle))
        return self._state

    async def _fetch_remote(self, handle: DownloadHandle, target: Path) -> None:
        envelope = RequestEnvelope(url=handle.url, strategy=TransportStrategy.BUFFERED, method="GET")
        response = await self._transport.send(envelope)
        try:
            with target.open("wb") as fh:
                async for chunk in response.aiter_bytes():
                    await asyncio.to_thread(fh.write, chunk)
        except (httpx.TransportError, httpx.StreamError) as exc:
            target.unlink(missing_ok=True)
            raise StreamInterruptedError() from exc
        finally:
            await response.aclose()

    @staticmethod
    def _resolve_target(destination: Path | None, handle: DownloadHandle) -> Path:
        if destination is None:
            return Path.cwd() / handle.filename
        if destination.is_dir():
            return destination / handle.filename
        return destination
