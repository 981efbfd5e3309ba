from abc import ABC, abstractmethod

import httpx

from metastrip.codec.models import ImageFile
from metastrip.pickers.exceptions import PickerError


class BaseFilePicker(ABC):
    """Contract for every file source (local disk, cloud providers)."""

    @abstractmethod
    async def choose(self) -> ImageFile | None:
        """Produce the chosen file.

        Returns:
            The file, or None when the user cancelled the selection.

        Raises:
            PickerError: if the file cannot be fetched.
        """


async def read_capped_body(
    response: httpx.Response, max_size_bytes: int | None, source: str
) -> bytes:
    """Collect a streamed download, giving up once it passes ``max_size_bytes``."""
    chunks: list[bytes] = []
    received = 0
    async for chunk in response.aiter_bytes():
        received += len(chunk)
        if max_size_bytes is not None and received > max_size_bytes:
            raise PickerError(
                f"{source} download failed: file exceeds {max_size_bytes} bytes"
            )
        chunks.append(chunk)
    return b"".join(chunks)
