"""Filesystem and web browser backed platform for desktop use.

Local handles are private files under a temporary directory, exposed as
``file://`` URIs. Out-of-band submissions are written as an auto-submitting
HTML form and opened in a new browser tab, so the browser performs the POST
and saves the response itself. Form pages live in the system temp directory
and outlive close, because the browser loads them after we return; pages
older than an hour are swept on the next submission.
"""

import html
import os
import shutil
import tempfile
import time
import uuid
import webbrowser
from pathlib import Path

from logpipe.artifacts.base import BasePlatform
from logpipe.artifacts.exceptions import OutOfBandRejectedError, UnknownHandleError
from logpipe.artifacts.models import safe_filename
from logpipe.logging.logger import Log

_FORM_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Submitting request</title></head>
<body onload="document.forms[0].submit()">
<form method="POST" action="{action}" enctype="application/x-www-form-urlencoded">
{inputs}
<noscript><button type="submit">Continue</button></noscript>
</form>
</body>
</html>
"""

_FORM_PREFIX = "logpipe-submit-"
FORM_PAGE_TTL_SECONDS = 3600


class LocalPlatform(BasePlatform):
    def __init__(self, root: Path | None = None, form_dir: Path | None = None) -> None:
        self._owns_root = root is None
        self._root = Path(tempfile.mkdtemp(prefix="logpipe-")) if root is None else root
        self._root.mkdir(parents=True, exist_ok=True)
        self._handles: dict[str, Path] = {}
        self._form_dir = form_dir if form_dir is not None else Path(tempfile.gettempdir())

    @property
    def root(self) -> Path:
        return self._root

    def create_local_handle(self, content: bytes, *, media_type: str, filename: str) -> str:
        safe_name = safe_filename(filename) or "artifact"
        path = self._root / f"{uuid.uuid4().hex}__{safe_name}"
        path.write_bytes(content)
        url = path.resolve().as_uri()
        self._handles[url] = path
        Log.debug(f"Created local handle {url} ({len(content)} bytes, {media_type})")
        return url

    def revoke(self, url: str) -> None:
        path = self._handles.pop(url, None)
        if path is None:
            return
        path.unlink(missing_ok=True)
        Log.debug(f"Revoked local handle {url}")

    def read(self, url: str) -> bytes:
        path = self._handles.get(url)
        if path is None:
            raise UnknownHandleError(f"No live handle for {url}")
        return path.read_bytes()

    def submit_out_of_band(self, url: str, fields: dict[str, str]) -> None:
        self._sweep_form_pages()
        inputs = "\n".join(
            f'<input type="hidden" name="{html.escape(name)}" value="{html.escape(value)}">'
            for name, value in fields.items()
        )
        fd, name = tempfile.mkstemp(prefix=_FORM_PREFIX, suffix=".html", dir=self._form_dir)
        page = Path(name)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(_FORM_TEMPLATE.format(action=html.escape(url), inputs=inputs))
        if not webbrowser.open_new_tab(page.resolve().as_uri()):
            page.unlink(missing_ok=True)
            raise OutOfBandRejectedError()
        Log.info(f"Handed POST {url} to the web browser")

    def close(self) -> None:
        for url in list(self._handles):
            self.revoke(url)
        if self._owns_root:
            shutil.rmtree(self._root, ignore_errors=True)

    def _sweep_form_pages(self) -> None:
        """Remove form pages left by earlier submissions once the browser is done with them."""
        cutoff = time.time() - FORM_PAGE_TTL_SECONDS
        for page in self._form_dir.glob(f"{_FORM_PREFIX}*.html"):
            try:
                if page.stat().st_mtime < cutoff:
                    page.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                Log.debug(f"Could not remove stale form page {page}: {exc}")
