from urllib.parse import quote

from logpipe.artifacts.base import BasePlatform
from logpipe.artifacts.exceptions import ArtifactError
from logpipe.artifacts.models import ArtifactKind, DownloadHandle, HandleKind, ResponseArtifact
from logpipe.logging.logger import Log


class ArtifactManager:
    """Sole owner of the pipeline's download handle.

    At most one local handle is live at any time: publishing always revokes
    the previous handle before the platform allocates the next one.
    """

    def __init__(self, platform: BasePlatform, download_base_url: str | None = None) -> None:
        self._platform = platform
        self._download_base_url = download_base_url
        self._current: DownloadHandle | None = None

    @property
    def current(self) -> DownloadHandle | None:
        return self._current

    def publish(self, artifact: ResponseArtifact) -> DownloadHandle | None:
        """Turn an artifact into a download handle, or None if there is nothing to download."""
        self.clear()
        if artifact.kind is ArtifactKind.CONTENT and artifact.content is not None:
            url = self._platform.create_local_handle(
                artifact.content,
                media_type=artifact.media_type,
                filename=artifact.filename,
            )
            handle = DownloadHandle(
                url=url,
                kind=HandleKind.LOCAL,
                filename=artifact.filename,
                media_type=artifact.media_type,
            )
        elif artifact.reference:
            handle = DownloadHandle(
                url=self._remote_url(artifact.reference),
                kind=HandleKind.REMOTE,
                filename=artifact.filename,
                media_type=artifact.media_type,
            )
        else:
            return None
        self._current = handle
        Log.info(f"Published {handle.kind.value} download handle for {handle.filename}")
        return handle

    def revoke(self, handle: DownloadHandle) -> None:
        if handle.kind is HandleKind.LOCAL:
            self._platform.revoke(handle.url)
        if self._current == handle:
            self._current = None

    def clear(self) -> None:
        if self._current is not None:
            self.revoke(self._current)

    def read(self, handle: DownloadHandle) -> bytes:
        if handle.kind is not HandleKind.LOCAL:
            raise ArtifactError(f"{handle.url} is a remote handle and must be fetched")
        return self._platform.read(handle.url)

    def close(self) -> None:
        self.clear()
        self._platform.close()

    def _remote_url(self, reference: str) -> str:
        if not self._download_base_url:
            raise ArtifactError("A download base URL is required for reference artifacts")
        return f"{self._download_base_url.rstrip('/')}/download/{quote(reference, safe='')}"
