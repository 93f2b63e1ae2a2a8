from unittest.mock import MagicMock

import pytest

from logpipe.artifacts.exceptions import ArtifactError
from logpipe.artifacts.manager import ArtifactManager
from logpipe.artifacts.memory_platform import MemoryPlatform
from logpipe.artifacts.models import DetectionSummary, HandleKind, ResponseArtifact


def _csv(body: bytes = b"ip,ts\n") -> ResponseArtifact:
    return ResponseArtifact.from_content(body, media_type="text/csv", filename="parsed.csv")


def _referenced(reference: str) -> ResponseArtifact:
    summary = DetectionSummary(totalRows=1, normalCount=1, maliciousCount=0)
    return ResponseArtifact.from_summary(summary, reference=reference)


class TestPublishContent:
    def test_creates_local_handle(self, memory_platform: MemoryPlatform) -> None:
        manager = ArtifactManager(memory_platform)

        handle = manager.publish(_csv())

        assert handle is not None
        assert handle.kind is HandleKind.LOCAL
        assert handle.filename == "parsed.csv"
        assert handle.media_type == "text/csv"
        assert manager.current == handle
        assert manager.read(handle) == b"ip,ts\n"

    def test_second_publish_revokes_first_before_creating(
        self, memory_platform: MemoryPlatform
    ) -> None:
        manager = ArtifactManager(memory_platform)

        first = manager.publish(_csv(b"first"))
        second = manager.publish(_csv(b"second"))

        assert first is not None and second is not None
        assert memory_platform.events == [
            ("create", first.url),
            ("revoke", first.url),
            ("create", second.url),
        ]
        assert memory_platform.live_handles == [second.url]

    def test_never_two_live_handles(self, memory_platform: MemoryPlatform) -> None:
        manager = ArtifactManager(memory_platform)
        observed: list[int] = []

        for i in range(5):
            manager.publish(_csv(str(i).encode()))
            observed.append(len(memory_platform.live_handles))

        assert observed == [1, 1, 1, 1, 1]


class TestPublishReference:
    def test_reference_is_a_single_path_segment(self) -> None:
        manager = ArtifactManager(MagicMock(), download_base_url="http://svc")

        handle = manager.publish(_referenced("../escaped.csv"))

        assert handle is not None
        assert handle.url == "http://svc/download/..%2Fescaped.csv"
        assert handle.filename == "escaped.csv"

    def test_derives_download_url(self) -> None:
        platform = MagicMock()
        manager = ArtifactManager(platform, download_base_url="http://svc:1000/")

        handle = manager.publish(_referenced("result 1.csv"))

        assert handle is not None
        assert handle.kind is HandleKind.REMOTE
        assert handle.url == "http://svc:1000/download/result%201.csv"
        platform.create_local_handle.assert_not_called()

    def test_revoke_remote_is_noop_for_platform(self) -> None:
        platform = MagicMock()
        manager = ArtifactManager(platform, download_base_url="http://svc")
        handle = manager.publish(_referenced("r.csv"))
        assert handle is not None

        manager.revoke(handle)

        platform.revoke.assert_not_called()
        assert manager.current is None

    def test_summary_with_reference_gets_remote_handle(self) -> None:
        manager = ArtifactManager(MagicMock(), download_base_url="http://svc")
        summary = DetectionSummary(totalRows=2, normalCount=1, maliciousCount=1)

        handle = manager.publish(ResponseArtifact.from_summary(summary, reference="pred.csv"))

        assert handle is not None
        assert handle.url == "http://svc/download/pred.csv"

    def test_requires_base_url(self) -> None:
        manager = ArtifactManager(MagicMock())

        with pytest.raises(ArtifactError, match="base URL"):
            manager.publish(_referenced("r.csv"))

    def test_remote_handle_cannot_be_read_locally(self) -> None:
        manager = ArtifactManager(MagicMock(), download_base_url="http://svc")
        handle = manager.publish(_referenced("r.csv"))
        assert handle is not None

        with pytest.raises(ArtifactError, match="remote"):
            manager.read(handle)


class TestNothingToDownload:
    def test_out_of_band_has_no_handle(self, memory_platform: MemoryPlatform) -> None:
        manager = ArtifactManager(memory_platform)
        manager.publish(_csv())

        handle = manager.publish(ResponseArtifact.out_of_band())

        assert handle is None
        assert manager.current is None
        assert memory_platform.live_handles == []

    def test_summary_without_reference_has_no_handle(self) -> None:
        manager = ArtifactManager(MagicMock())
        summary = DetectionSummary(totalRows=1, normalCount=1, maliciousCount=0)

        assert manager.publish(ResponseArtifact.from_summary(summary)) is None


class TestClear:
    def test_clear_revokes_current(self, memory_platform: MemoryPlatform) -> None:
        manager = ArtifactManager(memory_platform)
        manager.publish(_csv())

        manager.clear()

        assert manager.current is None
        assert memory_platform.live_handles == []

    def test_clear_without_handle_is_noop(self) -> None:
        platform = MagicMock()
        ArtifactManager(platform).clear()
        platform.revoke.assert_not_called()

    def test_close_releases_platform(self) -> None:
        platform = MagicMock()
        platform.create_local_handle.return_value = "memory://1/parsed.csv"
        manager = ArtifactManager(platform)
        manager.publish(_csv())

        manager.close()

        platform.revoke.assert_called_once_with("memory://1/parsed.csv")
        platform.close.assert_called_once_with()
