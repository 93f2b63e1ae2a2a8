from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, model_validator

_DEFAULT_FILENAME = "download.bin"
_MAX_FILENAME_LENGTH = 200


class DetectionSummary(BaseModel):
    """Classification counts returned by the anomaly detection service."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    total_rows: int = Field(alias="totalRows", ge=0)
    normal_count: int = Field(alias="normalCount", ge=0)
    malicious_count: int = Field(alias="maliciousCount", ge=0)

    @model_validator(mode="after")
    def _counts_fit_total(self) -> "DetectionSummary":
        if self.normal_count + self.malicious_count > self.total_rows:
            raise ValueError("normalCount + maliciousCount exceeds totalRows")
        return self

    @property
    def normal_percentage(self) -> str:
        return _percentage(self.normal_count, self.total_rows)

    @property
    def malicious_percentage(self) -> str:
        return _percentage(self.malicious_count, self.total_rows)

    def chart_data(self) -> dict[str, object]:
        """Pie chart series for the UI: normal vs malicious access."""
        return {
            "labels": ["Normal Access", "Malicious Access"],
            "datasets": [
                {
                    "data": [self.normal_count, self.malicious_count],
                    "backgroundColor": ["#36A2EB", "#FF6384"],
                    "hoverBackgroundColor": ["#36A2EB", "#FF6384"],
                }
            ],
        }


def _percentage(part: int, total: int) -> str:
    if total == 0:
        return "0.00"
    return f"{part / total * 100:.2f}"


class ArtifactKind(str, Enum):
    CONTENT = "content"
    SUMMARY = "summary"
    OUT_OF_BAND = "out_of_band"


def safe_filename(name: str) -> str:
    """Reduce a suggested filename to its last path component.

    Returns '' when nothing usable remains (empty, ``.`` or ``..``), so a
    name coming from a service can never point outside the directory it is
    written to.
    """
    base = PurePosixPath(name.replace("\\", "/").replace("\x00", "")).name.strip()
    if base in ("", ".", ".."):
        return ""
    if len(base) > _MAX_FILENAME_LENGTH:
        ext = PurePosixPath(base).suffix
        base = base[: _MAX_FILENAME_LENGTH - len(ext)] + ext
    return base


@dataclass(frozen=True)
class ResponseArtifact:
    """The result of one submission.

    CONTENT carries bytes buffered client-side. SUMMARY carries detector
    counts and optionally ``reference``, a server-issued name fetched later
    from the download endpoint. OUT_OF_BAND carries nothing: the host
    environment received the response directly. ``filename`` is always a
    bare file name.
    """

    kind: ArtifactKind
    content: bytes | None = None
    reference: str | None = None
    summary: DetectionSummary | None = None
    media_type: str = "application/octet-stream"
    filename: str = _DEFAULT_FILENAME

    def __post_init__(self) -> None:
        object.__setattr__(self, "filename", safe_filename(self.filename) or _DEFAULT_FILENAME)

    @classmethod
    def from_content(cls, content: bytes, *, media_type: str, filename: str) -> "ResponseArtifact":
        return cls(kind=ArtifactKind.CONTENT, content=content, media_type=media_type, filename=filename)

    @classmethod
    def from_summary(
        cls,
        summary: DetectionSummary,
        *,
        reference: str | None = None,
    ) -> "ResponseArtifact":
        return cls(
            kind=ArtifactKind.SUMMARY,
            summary=summary,
            reference=reference,
            filename=reference or "summary.json",
        )

    @classmethod
    def out_of_band(cls) -> "ResponseArtifact":
        return cls(kind=ArtifactKind.OUT_OF_BAND)


class HandleKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class DownloadHandle:
    """A download reference for the UI.

    LOCAL handles point at a resource allocated by the platform and must be
    revoked. REMOTE handles are derived URLs on the download endpoint and own
    nothing.
    """

    url: str
    kind: HandleKind
    filename: str
    media_type: str = "application/octet-stream"
