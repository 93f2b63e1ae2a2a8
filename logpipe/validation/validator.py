"""Pre-flight checks run before anything touches the network."""

from logpipe.exceptions import FailureReason
from logpipe.validation.models import Accepted, InputFile, Rejected, ValidationOutcome, ValidationRule

_MEGABYTE = 1024 * 1024
_KILOBYTE = 1024


def validate(file: InputFile, rule: ValidationRule) -> ValidationOutcome:
    """Check ``file`` against the extension set and size ceiling of ``rule``.

    The extension check is a case-insensitive suffix match and runs first,
    so a wrong type is reported even when the file is also too large.
    """
    name = file.name.lower()
    if not any(name.endswith(ext) for ext in rule.extensions):
        return Rejected(
            reason=FailureReason.INVALID_TYPE,
            message=f"Invalid file type. Please select a {describe_extensions(rule)} file.",
        )
    if file.size > rule.max_bytes:
        return Rejected(
            reason=FailureReason.TOO_LARGE,
            message=(
                f"File size exceeds {format_limit(rule.max_bytes)}. "
                "Please upload a smaller file."
            ),
        )
    return Accepted()


def validate_generation(count: int, ratio: float) -> ValidationOutcome:
    """Check generator parameters: a positive row count and a ratio in [0, 1]."""
    if count <= 0:
        return Rejected(
            reason=FailureReason.INVALID_PARAMETERS,
            message="Total entries must be greater than zero.",
        )
    if ratio < 0 or ratio > 1:
        return Rejected(
            reason=FailureReason.INVALID_PARAMETERS,
            message="Malicious ratio must be between 0 and 1.",
        )
    return Accepted()


def describe_extensions(rule: ValidationRule) -> str:
    ordered = sorted(rule.extensions)
    if len(ordered) == 1:
        return ordered[0]
    return f"{', '.join(ordered[:-1])} or {ordered[-1]}"


def format_limit(max_bytes: int) -> str:
    if max_bytes >= _MEGABYTE:
        value, unit = max_bytes / _MEGABYTE, "MB"
    elif max_bytes >= _KILOBYTE:
        value, unit = max_bytes / _KILOBYTE, "KB"
    else:
        return f"{max_bytes} bytes"
    if value == int(value):
        return f"{int(value)}{unit}"
    return f"{value:.1f}{unit}"
