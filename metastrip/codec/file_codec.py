import asyncio
import base64
import binascii
import re

from metastrip.codec.models import ImageFile, SerializedFile
from metastrip.logging.logger import Log

_HEADER_RE = re.compile(r"^data:(?P<mime>[^;,]+);base64$")

DEFAULT_MIME_TYPE = "application/octet-stream"


class FileCodec:
    """Converts between ImageFile and its self-describing data URL form."""

    async def encode(self, file: ImageFile) -> SerializedFile:
        """Serialize the file; resolves once every byte is encoded."""
        payload = await asyncio.to_thread(base64.b64encode, file.content)
        mime_type = file.mime_type or DEFAULT_MIME_TYPE
        return SerializedFile(
            name=file.name,
            type=file.mime_type,
            size=file.size,
            last_modified=file.last_modified,
            data_url=f"data:{mime_type};base64,{payload.decode('ascii')}",
        )

    def decode(self, serialized: SerializedFile) -> ImageFile | None:
        """Rebuild the file, or return None for an unusable record."""
        header, separator, payload = serialized.data_url.partition(",")
        if not separator:
            Log.error(f"Invalid data URL for '{serialized.name}': missing payload separator")
            return None
        if _HEADER_RE.match(header) is None:
            Log.error(f"Unable to extract MIME type from data URL for '{serialized.name}'")
            return None
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            Log.error(f"Invalid base64 payload for '{serialized.name}': {exc}")
            return None
        if len(content) != serialized.size:
            Log.error(
                f"Decoded {len(content)} bytes for '{serialized.name}', "
                f"expected {serialized.size}"
            )
            return None
        return ImageFile(
            name=serialized.name,
            mime_type=serialized.type,
            content=content,
            last_modified=serialized.last_modified,
        )
