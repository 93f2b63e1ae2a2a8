"""Failure taxonomy shared by every stage of the pipeline.

Each concrete error is bound to exactly one FailureReason so the state
machine can turn any raised error into a Failed(reason, message) state
without inspecting the exception type.
"""

from enum import Enum
from typing import ClassVar


class FailureReason(str, Enum):
    INVALID_TYPE = "invalid_type"
    TOO_LARGE = "too_large"
    INVALID_PARAMETERS = "invalid_parameters"
    FILE_UNREADABLE = "file_unreadable"
    TRANSIENT_TRANSPORT_ERROR = "transient_transport_error"
    STREAM_INTERRUPTED = "stream_interrupted"
    EMPTY_OR_INVALID_PAYLOAD = "empty_or_invalid_payload"
    SERVICE_ERROR = "service_error"


GENERIC_FAILURE_MESSAGE = "Error uploading file or processing data."


class PipelineError(Exception):
    """Base exception for all failures surfaced to the pipeline caller."""

    reason: ClassVar[FailureReason] = FailureReason.SERVICE_ERROR
    default_message: ClassVar[str] = GENERIC_FAILURE_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class FileReadError(PipelineError):
    """Raised when the selected file cannot be read from disk."""

    reason = FailureReason.FILE_UNREADABLE
    default_message = "The selected file could not be read."
