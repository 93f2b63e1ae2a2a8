from logpipe.exceptions import FailureReason, PipelineError


class TransientTransportError(PipelineError):
    """Raised for failures worth retrying: connection errors, timeouts, 5xx.

    ``status_code`` is set when the service answered with an HTTP error, and
    ``service_message`` when that answer carried a readable message.
    """

    reason = FailureReason.TRANSIENT_TRANSPORT_ERROR
    default_message = (
        "Error connecting to the server. Please check your connection and try again."
    )

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.service_message = message


class ServiceError(PipelineError):
    """Raised when the service rejects the request with an actionable message."""

    reason = FailureReason.SERVICE_ERROR

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyOrInvalidPayloadError(PipelineError):
    """Raised when the service reports the uploaded input as empty or unusable."""

    reason = FailureReason.EMPTY_OR_INVALID_PAYLOAD
    default_message = "The uploaded CSV file is empty. Please upload a valid dataset."
