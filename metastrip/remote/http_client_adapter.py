import httpx

from metastrip.codec.models import ImageFile
from metastrip.logging.logger import Log
from metastrip.remote.base import BaseMetadataService
from metastrip.remote.exceptions import (
    RemoteNetworkError,
    RemoteRateLimitError,
    RemoteServiceError,
)
from metastrip.remote.models import ImageMetadata


class HttpMetadataService(BaseMetadataService):
    """Metadata service adapter speaking the multipart HTTP API."""

    INSPECT_FALLBACK_ERROR = "Failed to extract metadata"
    STRIP_FALLBACK_ERROR = "Failed to strip metadata"
    RATE_LIMIT_FALLBACK_ERROR = "Too many requests. Please try again later."

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    async def inspect(self, file: ImageFile) -> ImageMetadata:
        response = await self._post_file("/metadata", file, self.INSPECT_FALLBACK_ERROR)
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteServiceError(f"{self.INSPECT_FALLBACK_ERROR}: invalid JSON") from exc
        if not isinstance(payload, dict):
            raise RemoteServiceError(f"{self.INSPECT_FALLBACK_ERROR}: unexpected response")
        try:
            return ImageMetadata.from_dict(payload)
        except ValueError as exc:
            raise RemoteServiceError(f"{self.INSPECT_FALLBACK_ERROR}: {exc}") from exc

    async def strip(self, file: ImageFile) -> bytes:
        response = await self._post_file("/strip", file, self.STRIP_FALLBACK_ERROR)
        if not response.content:
            raise RemoteServiceError(f"{self.STRIP_FALLBACK_ERROR}: empty response")
        return response.content

    async def health(self) -> str:
        try:
            response = await self._client.get("/health")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteServiceError("API is not available") from exc
        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post_file(
        self, path: str, file: ImageFile, fallback_error: str
    ) -> httpx.Response:
        files = {"file": (file.name, file.content, file.mime_type or "application/octet-stream")}
        Log.debug(f"POST {path} with '{file.name}' ({file.size} bytes)")
        try:
            response = await self._client.post(path, files=files)
        except httpx.RequestError as exc:
            raise RemoteNetworkError(f"{fallback_error}: network error: {exc}") from exc

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise RemoteRateLimitError(
                self._error_message(response, self.RATE_LIMIT_FALLBACK_ERROR),
                retry_after_seconds=self._retry_after(response),
            )
        if response.is_error:
            raise RemoteServiceError(self._error_message(response, fallback_error))
        return response

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            message = body.get("error")
            if isinstance(message, str) and message:
                return message
        return fallback

    @staticmethod
    def _retry_after(response: httpx.Response) -> int | None:
        header = response.headers.get("Retry-After")
        if header is not None and header.strip().isdigit():
            return int(header.strip())
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("retryAfter"), int):
            return body["retryAfter"]
        return None
