from logpipe.exceptions import FailureReason, PipelineError


class ArtifactError(Exception):
    """Base exception for download handle misuse."""


class UnknownHandleError(ArtifactError):
    """Raised when a handle was never created here or has already been revoked."""


class NoDownloadAvailableError(ArtifactError):
    """Raised when download is requested without a downloadable result."""


class OutOfBandRejectedError(PipelineError):
    """Raised when the host environment refuses an out-of-band submission."""

    reason = FailureReason.SERVICE_ERROR
    default_message = "Could not hand the request to the browser. Please try again."
