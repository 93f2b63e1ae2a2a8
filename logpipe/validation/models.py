from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from logpipe.exceptions import FailureReason


@dataclass(frozen=True)
class InputFile:
    """A user-selected file: payload plus the metadata shown before upload.

    Exactly one of ``path`` or ``content`` carries the payload. The pipeline
    never mutates the file and reads it once per submission.
    """

    name: str
    size: int
    last_modified: datetime | None = None
    path: Path | None = None
    content: bytes | None = field(default=None, repr=False)

    @classmethod
    def from_path(cls, path: Path) -> "InputFile":
        stat = path.stat()
        return cls(
            name=path.name,
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            path=path,
        )

    @classmethod
    def from_bytes(
        cls,
        name: str,
        content: bytes,
        last_modified: datetime | None = None,
    ) -> "InputFile":
        return cls(name=name, size=len(content), last_modified=last_modified, content=content)

    def read_bytes(self) -> bytes:
        """Return the payload.

        Raises:
            FileNotFoundError: if the backing path no longer exists.
            ValueError: if the file carries neither a path nor content.
        """
        if self.content is not None:
            return self.content
        if self.path is None:
            raise ValueError(f"InputFile '{self.name}' has no payload")
        return self.path.read_bytes()


@dataclass(frozen=True)
class ValidationRule:
    """Accepted extensions and byte ceiling for one pipeline instance."""

    extensions: frozenset[str]
    max_bytes: int

    def __post_init__(self) -> None:
        normalized = frozenset(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in self.extensions
        )
        if not normalized:
            raise ValueError("ValidationRule requires at least one extension")
        if self.max_bytes <= 0:
            raise ValueError("ValidationRule.max_bytes must be positive")
        object.__setattr__(self, "extensions", normalized)


@dataclass(frozen=True)
class Accepted:
    """The candidate passed every check."""

    ok: bool = True


@dataclass(frozen=True)
class Rejected:
    """The candidate failed a check; nothing may be transmitted."""

    reason: FailureReason
    message: str
    ok: bool = False


ValidationOutcome = Accepted | Rejected
