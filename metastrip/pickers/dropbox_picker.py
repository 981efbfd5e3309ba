import time
from urllib.parse import unquote, urlparse

import httpx

from metastrip.codec.models import ImageFile
from metastrip.pickers.base import BaseFilePicker, read_capped_body
from metastrip.pickers.exceptions import PickerError


class DropboxPicker(BaseFilePicker):
    """Downloads a file from a Dropbox Chooser direct link."""

    def __init__(
        self,
        *,
        link: str,
        file_name: str = "",
        timeout_seconds: int = 30,
        max_size_bytes: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._link = link
        self._file_name = file_name or _name_from_link(link)
        self._timeout_seconds = timeout_seconds
        self._max_size_bytes = max_size_bytes
        self._transport = transport

    async def choose(self) -> ImageFile | None:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                async with client.stream("GET", self._link) as response:
                    response.raise_for_status()
                    content = await read_capped_body(
                        response, self._max_size_bytes, "Dropbox"
                    )
        except httpx.HTTPError as exc:
            raise PickerError(f"Dropbox download failed: {exc}") from exc

        mime_type = response.headers.get("Content-Type", "").split(";")[0].strip()
        return ImageFile(
            name=self._file_name,
            mime_type=mime_type,
            content=content,
            last_modified=int(time.time() * 1000),
        )


def _name_from_link(link: str) -> str:
    return unquote(urlparse(link).path.rsplit("/", 1)[-1]) or "dropbox-file"
