import asyncio
import mimetypes
from abc import abstractmethod

from logpipe.artifacts.base import BasePlatform
from logpipe.artifacts.models import ResponseArtifact
from logpipe.exceptions import FileReadError
from logpipe.logging.logger import Log
from logpipe.pipeline.base import BasePipeline
from logpipe.pipeline.config import PipelineConfig
from logpipe.pipeline.state import Failed, Idle, PipelineState, Validating
from logpipe.transport.base import BaseTransport
from logpipe.transport.models import RequestEnvelope
from logpipe.transport.retry import Sleep
from logpipe.transport.strategy import select_strategy
from logpipe.validation.models import InputFile, Rejected, ValidationOutcome
from logpipe.validation.validator import validate

NO_FILE_MESSAGE = "Please select a file."


class FileUploadPipeline(BasePipeline):
    """Pipeline whose input is a single user-selected file sent as multipart ``file``."""

    def __init__(
        self,
        config: PipelineConfig,
        transport: BaseTransport,
        platform: BasePlatform,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if config.validation_rule is None:
            raise ValueError(f"{self.__class__.__name__} requires a validation rule")
        if config.out_of_band_threshold is not None:
            raise ValueError("File uploads cannot be submitted out of band")
        super().__init__(config, transport, platform, sleep=sleep)
        self._file: InputFile | None = None

    @property
    def file(self) -> InputFile | None:
        return self._file

    def select(self, file: InputFile) -> ValidationOutcome:
        """Validate a picked or dropped file immediately.

        A valid file replaces the selection and invalidates any previous
        result; a rejected one clears the selection and shows the reason.
        """
        outcome = validate(file, self._config.validation_rule)
        self._invalidate()
        if isinstance(outcome, Rejected):
            Log.warning(f"Rejected {file.name}: {outcome.message}")
            self._file = None
            self._set_state(Idle(error=outcome.message))
            return outcome
        Log.info(f"Selected {file.name} ({file.size} bytes)")
        self._file = file
        self._set_state(Idle(file=file))
        return outcome

    def clear(self) -> None:
        self._file = None
        super().clear()

    async def submit(self) -> PipelineState:
        file = self._file
        if file is None:
            self._set_state(Idle(error=NO_FILE_MESSAGE))
            return self._state

        generation = self._invalidate()
        self._set_state(Validating())
        outcome = validate(file, self._config.validation_rule)
        if isinstance(outcome, Rejected):
            self._set_state(Failed(reason=outcome.reason, message=outcome.message))
            return self._state
        return await self._run(generation, lambda: self._upload(generation, file))

    async def _upload(self, generation: int, file: InputFile) -> ResponseArtifact:
        strategy = select_strategy(file.size, self._config.out_of_band_threshold)
        try:
            payload = await asyncio.to_thread(file.read_bytes)
        except OSError as exc:
            raise FileReadError() from exc
        media_type = mimetypes.guess_type(file.name)[0] or "application/octet-stream"
        envelope = RequestEnvelope(
            url=self._config.endpoint_url,
            strategy=strategy,
            files={"file": (file.name, payload, media_type)},
        )
        Log.info(f"Uploading {file.name} ({len(payload)} bytes) to {envelope.url}")
        return await self._exchange(generation, envelope)

    @abstractmethod
    async def _exchange(self, generation: int, envelope: RequestEnvelope) -> ResponseArtifact:
        """Send the envelope and turn the service response into an artifact."""
