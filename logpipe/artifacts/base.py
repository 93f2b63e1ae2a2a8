from abc import ABC, abstractmethod


class BasePlatform(ABC):
    """Host capabilities the pipeline needs but does not implement itself."""

    @abstractmethod
    def create_local_handle(self, content: bytes, *, media_type: str, filename: str) -> str:
        """Store ``content`` and return a revocable URL for it."""

    @abstractmethod
    def revoke(self, url: str) -> None:
        """Release the resource behind ``url``. Revoking twice is a no-op."""

    @abstractmethod
    def read(self, url: str) -> bytes:
        """Return the bytes behind a live local handle.

        Raises:
            UnknownHandleError: if ``url`` is not a live handle.
        """

    @abstractmethod
    def submit_out_of_band(self, url: str, fields: dict[str, str]) -> None:
        """Hand a form POST to the host environment's own navigation.

        Returns once the host accepts the submission; the response is
        never seen by the caller.

        Raises:
            OutOfBandRejectedError: if the host refuses the submission.
        """

    def close(self) -> None:
        """Release everything the platform still holds."""
