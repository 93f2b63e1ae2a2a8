from pathlib import Path

from logpipe.artifacts.base import BasePlatform
from logpipe.artifacts.local_platform import LocalPlatform
from logpipe.artifacts.memory_platform import MemoryPlatform
from logpipe.config.settings import Settings


class PlatformFactory:
    """Creates the configured host platform."""

    PLATFORMS: tuple[str, ...] = ("local", "memory")

    @classmethod
    def create(cls, settings: Settings) -> BasePlatform:
        name = settings.artifact_platform.lower()
        if name == "memory":
            return MemoryPlatform()
        if name == "local":
            root = Path(settings.artifact_dir) if settings.artifact_dir else None
            return LocalPlatform(root=root)
        raise ValueError(
            f"Unknown artifact platform '{name}'. Choose from: {list(cls.PLATFORMS)}"
        )
