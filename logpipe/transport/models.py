from dataclasses import dataclass, field

from logpipe.transport.strategy import TransportStrategy

MultipartFiles = dict[str, tuple[str, bytes, str]]


@dataclass(frozen=True)
class RequestEnvelope:
    """A request fixed before any network activity.

    The strategy tag never changes once the envelope exists; retries resend
    the very same payload. At most one of ``files``, ``json`` or ``data`` is set.
    """

    url: str
    strategy: TransportStrategy
    method: str = "POST"
    files: MultipartFiles | None = field(default=None, repr=False)
    json: dict[str, object] | None = None
    data: dict[str, str] | None = None

    def __post_init__(self) -> None:
        bodies = [body for body in (self.files, self.json, self.data) if body is not None]
        if len(bodies) > 1:
            raise ValueError("RequestEnvelope accepts only one of files, json or data")
