from dataclasses import dataclass

from logpipe.artifacts.models import DownloadHandle, ResponseArtifact
from logpipe.exceptions import FailureReason
from logpipe.validation.models import InputFile


@dataclass(frozen=True)
class Idle:
    """Waiting for input. ``error`` holds the last rejection shown to the user."""

    file: InputFile | None = None
    error: str = ""


@dataclass(frozen=True)
class Validating:
    """Pre-flight checks for the current submission are running."""


@dataclass(frozen=True)
class Uploading:
    attempt: int = 1


@dataclass(frozen=True)
class StreamingResponse:
    bytes_received: int = 0


@dataclass(frozen=True)
class Success:
    artifact: ResponseArtifact
    handle: DownloadHandle | None = None


@dataclass(frozen=True)
class Failed:
    reason: FailureReason
    message: str


PipelineState = Idle | Validating | Uploading | StreamingResponse | Success | Failed
