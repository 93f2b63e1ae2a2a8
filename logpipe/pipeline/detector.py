import json

from pydantic import ValidationError

from logpipe.artifacts.models import DetectionSummary, ResponseArtifact, safe_filename
from logpipe.logging.logger import Log
from logpipe.pipeline.upload import FileUploadPipeline
from logpipe.transport.exceptions import EmptyOrInvalidPayloadError, ServiceError
from logpipe.transport.models import RequestEnvelope
from logpipe.transport.payloads import is_empty_payload

_REFERENCE_KEYS = ("reference", "filename")


class AnomalyDetectorPipeline(FileUploadPipeline):
    """Uploads a dataset and reads back the normal/malicious classification counts.

    The service answers with a bare sentinel (``emptyCSV``) when the dataset
    has no rows; that is a terminal error and is never retried. When the JSON
    also names a result file, it becomes a remote download handle.
    """

    async def _exchange(self, generation: int, envelope: RequestEnvelope) -> ResponseArtifact:
        response = await self._transport.fetch(envelope, on_attempt=self._on_attempt(generation))
        body = response.content
        if is_empty_payload(body, self._config.empty_payload_sentinel):
            raise EmptyOrInvalidPayloadError()

        try:
            data = json.loads(body)
        except ValueError as exc:
            raise ServiceError("The service returned an unreadable response.") from exc
        if not isinstance(data, dict):
            raise ServiceError("The service returned an unexpected response.")
        try:
            summary = DetectionSummary.model_validate(data)
        except ValidationError as exc:
            Log.warning(f"Invalid detection summary: {exc.error_count()} errors")
            raise ServiceError("The service returned an incomplete detection summary.") from exc

        Log.info(
            f"Detection complete: {summary.total_rows} rows, "
            f"{summary.normal_percentage}% normal, {summary.malicious_percentage}% malicious"
        )
        return ResponseArtifact.from_summary(summary, reference=_find_reference(data))


def _find_reference(data: dict[str, object]) -> str | None:
    for key in _REFERENCE_KEYS:
        value = data.get(key)
        if isinstance(value, str) and safe_filename(value):
            return value.strip()
    return None
