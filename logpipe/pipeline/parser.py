from logpipe.artifacts.models import ResponseArtifact
from logpipe.pipeline.state import StreamingResponse
from logpipe.pipeline.upload import FileUploadPipeline
from logpipe.streaming.reassembler import reassemble
from logpipe.transport.models import RequestEnvelope

PARSED_FILENAME = "parsed.csv"
PARSED_MEDIA_TYPE = "text/csv"


class LogParserPipeline(FileUploadPipeline):
    """Uploads an access log and reassembles the streamed CSV the service returns."""

    async def _exchange(self, generation: int, envelope: RequestEnvelope) -> ResponseArtifact:
        response = await self._transport.send(envelope, on_attempt=self._on_attempt(generation))
        self._transition(generation, StreamingResponse(0))
        try:
            content = await reassemble(response.aiter_bytes(), on_progress=self._on_progress(generation))
        finally:
            await response.aclose()
        return ResponseArtifact.from_content(
            content,
            media_type=PARSED_MEDIA_TYPE,
            filename=PARSED_FILENAME,
        )
