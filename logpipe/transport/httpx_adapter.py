import httpx

from logpipe.exceptions import PipelineError
from logpipe.logging.logger import Log
from logpipe.transport.base import BaseTransport
from logpipe.transport.exceptions import (
    EmptyOrInvalidPayloadError,
    ServiceError,
    TransientTransportError,
)
from logpipe.transport.models import RequestEnvelope
from logpipe.transport.payloads import extract_message, is_empty_payload

_RETRYABLE_STATUSES = frozenset({408, 425, 429})


class HttpxTransport(BaseTransport):
    """Transport adapter built on ``httpx.AsyncClient``.

    Responses are opened in streaming mode so callers decide whether to
    buffer the body or reassemble it chunk by chunk.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float,
        empty_payload_sentinel: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)
        self._empty_payload_sentinel = empty_payload_sentinel

    async def open(self, envelope: RequestEnvelope) -> httpx.Response:
        request = self._client.build_request(
            envelope.method,
            envelope.url,
            files=envelope.files,
            json=envelope.json,
            data=envelope.data,
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.TransportError as exc:
            Log.debug(f"{envelope.method} {envelope.url} raised {exc.__class__.__name__}: {exc}")
            raise TransientTransportError() from exc

        if response.is_success:
            return response
        raise await self._error_for(response)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _error_for(self, response: httpx.Response) -> PipelineError:
        """Read and close a non-2xx response and classify it."""
        status = response.status_code
        try:
            body = await response.aread()
        except httpx.TransportError:
            return TransientTransportError(status_code=status)
        finally:
            await response.aclose()

        if is_empty_payload(body, self._empty_payload_sentinel):
            return EmptyOrInvalidPayloadError()

        message = extract_message(body)
        Log.debug(f"HTTP {status} from {response.url}: {message or '<no message>'}")
        if status >= 500 or status in _RETRYABLE_STATUSES or not message:
            return TransientTransportError(message or None, status_code=status)
        return ServiceError(message, status_code=status)
