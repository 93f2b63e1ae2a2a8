from logpipe.exceptions import FailureReason, PipelineError


class StreamInterruptedError(PipelineError):
    """Raised when a streamed response body ends before the source completes."""

    reason = FailureReason.STREAM_INTERRUPTED
    default_message = "The connection was interrupted while receiving the result. Please try again."
