from abc import ABC, abstractmethod

import httpx

from logpipe.transport.models import RequestEnvelope


class BaseTransport(ABC):
    """Contract for a single, non-retried HTTP exchange."""

    @abstractmethod
    async def open(self, envelope: RequestEnvelope) -> httpx.Response:
        """Send the envelope and return a 2xx response with an unread body.

        The caller owns the returned response and must close it.

        Raises:
            TransientTransportError: on connection failures and retryable statuses.
            ServiceError: on a non-retryable status with a service message.
            EmptyOrInvalidPayloadError: when the body carries the empty-input sentinel.
        """

    async def aclose(self) -> None:
        """Release connections held by the transport."""
