import time
from urllib.parse import quote

import httpx

from metastrip.codec.models import ImageFile
from metastrip.pickers.base import BaseFilePicker, read_capped_body
from metastrip.pickers.exceptions import PickerError


class GoogleDrivePicker(BaseFilePicker):
    """Downloads a file already picked in Google Drive.

    The Drive picker UI and OAuth flow live outside this client; this
    adapter receives the picked file id and a valid access token.
    """

    DOWNLOAD_URL = "https://www.googleapis.com/drive/v3/files/{file_id}"

    def __init__(
        self,
        *,
        file_id: str,
        file_name: str,
        mime_type: str,
        access_token: str,
        timeout_seconds: int = 30,
        max_size_bytes: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._file_id = file_id
        self._file_name = file_name
        self._mime_type = mime_type
        self._access_token = access_token
        self._timeout_seconds = timeout_seconds
        self._max_size_bytes = max_size_bytes
        self._transport = transport

    async def choose(self) -> ImageFile | None:
        if not self._access_token:
            raise PickerError("Google Drive download failed: no access token")
        url = self.DOWNLOAD_URL.format(file_id=quote(self._file_id, safe=""))
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds, transport=self._transport
            ) as client:
                async with client.stream(
                    "GET",
                    url,
                    params={"alt": "media"},
                    headers={"Authorization": f"Bearer {self._access_token}"},
                ) as response:
                    response.raise_for_status()
                    content = await read_capped_body(
                        response, self._max_size_bytes, "Google Drive"
                    )
        except httpx.HTTPError as exc:
            raise PickerError(f"Google Drive download failed: {exc}") from exc

        mime_type = self._mime_type or _content_type(response)
        return ImageFile(
            name=self._file_name,
            mime_type=mime_type,
            content=content,
            last_modified=int(time.time() * 1000),
        )


def _content_type(response: httpx.Response) -> str:
    return response.headers.get("Content-Type", "").split(";")[0].strip()
