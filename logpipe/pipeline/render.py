"""Pure text rendering of pipeline states for the command line front end."""

from logpipe.artifacts.models import ArtifactKind
from logpipe.pipeline.state import (
    Failed,
    Idle,
    PipelineState,
    StreamingResponse,
    Success,
    Uploading,
    Validating,
)
from logpipe.validation.models import InputFile


def render_state(state: PipelineState) -> str:
    if isinstance(state, Idle):
        if state.error:
            return f"Error: {state.error}"
        if state.file is None:
            return "No file selected"
        return f"Selected {state.file.name} ({_describe_file(state.file)})"
    if isinstance(state, Validating):
        return "Validating..."
    if isinstance(state, Uploading):
        if state.attempt == 1:
            return "Processing..."
        return f"Processing... (attempt {state.attempt})"
    if isinstance(state, StreamingResponse):
        return f"Received {state.bytes_received} bytes"
    if isinstance(state, Success):
        return _render_success(state)
    if isinstance(state, Failed):
        return f"Error: {state.message}"
    raise TypeError(f"Unknown pipeline state: {state!r}")


def _describe_file(file: InputFile) -> str:
    size = f"{file.size / 1024:.2f} KB"
    if file.last_modified is None:
        return size
    return f"{size} • Last modified: {file.last_modified.date().isoformat()}"


def _render_success(state: Success) -> str:
    artifact = state.artifact
    if artifact.kind is ArtifactKind.OUT_OF_BAND:
        return "Success! The request was handed to your browser, which will save the result."
    lines = ["Success!"]
    if artifact.summary is not None:
        summary = artifact.summary
        lines.append(f"Total rows: {summary.total_rows}")
        lines.append(f"Normal Access: {summary.normal_count} ({summary.normal_percentage}%)")
        lines.append(
            f"Malicious Access: {summary.malicious_count} ({summary.malicious_percentage}%)"
        )
    if state.handle is not None:
        lines.append(f"{state.handle.filename} is ready for download")
    return "\n".join(lines)
