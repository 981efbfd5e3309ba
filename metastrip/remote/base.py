from abc import ABC, abstractmethod

from metastrip.codec.models import ImageFile
from metastrip.remote.models import ImageMetadata


class BaseMetadataService(ABC):
    """Contract for the remote metadata extraction/stripping service."""

    @abstractmethod
    async def inspect(self, file: ImageFile) -> ImageMetadata:
        """Return the metadata embedded in ``file``.

        Raises:
            RemoteRateLimitError: if the service rate-limits the caller.
            RemoteServiceError: on any other failure.
        """

    @abstractmethod
    async def strip(self, file: ImageFile) -> bytes:
        """Return a complete copy of ``file`` with all metadata removed.

        Raises:
            RemoteRateLimitError: if the service rate-limits the caller.
            RemoteServiceError: on any other failure.
        """

    @abstractmethod
    async def health(self) -> str:
        """Return the service's liveness message.

        Raises:
            RemoteServiceError: if the service is not available.
        """

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
