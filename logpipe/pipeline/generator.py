from logpipe.artifacts.models import ResponseArtifact
from logpipe.logging.logger import Log
from logpipe.pipeline.base import BasePipeline
from logpipe.pipeline.state import Failed, PipelineState, Uploading, Validating
from logpipe.transport.models import RequestEnvelope
from logpipe.transport.strategy import TransportStrategy, select_strategy
from logpipe.validation.models import Rejected
from logpipe.validation.validator import validate_generation

GENERATED_MEDIA_TYPE = "text/plain"


def generated_filename(count: int, ratio: float) -> str:
    return f"generated_log_{count}_{ratio}.log"


class LogGeneratorPipeline(BasePipeline):
    """Asks the service for ``count`` synthetic access-log rows.

    Requests at or above the out-of-band threshold are handed to the
    platform as a form POST so the response never passes through this
    process; success is assumed once the platform accepts it.
    """

    async def submit(self, count: int, ratio: float) -> PipelineState:
        generation = self._invalidate()
        self._set_state(Validating())
        outcome = validate_generation(count, ratio)
        if isinstance(outcome, Rejected):
            self._set_state(Failed(reason=outcome.reason, message=outcome.message))
            return self._state
        return await self._run(generation, lambda: self._generate(generation, count, ratio))

    async def _generate(self, generation: int, count: int, ratio: float) -> ResponseArtifact:
        strategy = select_strategy(count, self._config.out_of_band_threshold)
        fields: dict[str, object] = {"total_entries": count, "malicious_ratio": ratio}

        if strategy is TransportStrategy.OUT_OF_BAND:
            self._transition(generation, Uploading(1))
            self._platform.submit_out_of_band(
                self._config.endpoint_url,
                {name: str(value) for name, value in fields.items()},
            )
            return ResponseArtifact.out_of_band()

        envelope = RequestEnvelope(url=self._config.endpoint_url, strategy=strategy, json=fields)
        response = await self._transport.fetch(envelope, on_attempt=self._on_attempt(generation))
        Log.info(f"Generated {count} rows ({len(response.content)} bytes)")
        return ResponseArtifact.from_content(
            response.content,
            media_type=response.headers.get("content-type", GENERATED_MEDIA_TYPE),
            filename=generated_filename(count, ratio),
        )
