"""In-memory platform.

Keeps artifacts in a dict and records out-of-band submissions instead of
opening a browser. Useful for headless runs, tests, and as a template for
other host integrations.
"""

import itertools

from logpipe.artifacts.base import BasePlatform
from logpipe.artifacts.exceptions import UnknownHandleError


class MemoryPlatform(BasePlatform):
    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._handles: dict[str, bytes] = {}
        self.events: list[tuple[str, str]] = []
        self.submissions: list[tuple[str, dict[str, str]]] = []

    @property
    def live_handles(self) -> list[str]:
        return list(self._handles)

    def create_local_handle(self, content: bytes, *, media_type: str, filename: str) -> str:
        _ = media_type
        url = f"memory://{next(self._counter)}/{filename}"
        self._handles[url] = content
        self.events.append(("create", url))
        return url

    def revoke(self, url: str) -> None:
        if self._handles.pop(url, None) is not None:
            self.events.append(("revoke", url))

    def read(self, url: str) -> bytes:
        try:
            return self._handles[url]
        except KeyError as exc:
            raise UnknownHandleError(f"No live handle for {url}") from exc

    def submit_out_of_band(self, url: str, fields: dict[str, str]) -> None:
        self.submissions.append((url, dict(fields)))

    def close(self) -> None:
        for url in list(self._handles):
            self.revoke(url)
