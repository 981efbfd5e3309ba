"""Offline metadata service adapter.

Useful for local development and tests when the real service is not
running. No network calls are made.
"""

from metastrip.codec.models import ImageFile
from metastrip.remote.base import BaseMetadataService
from metastrip.remote.models import ImageMetadata, MetadataGroup


class ExampleMetadataService(BaseMetadataService):
    """Answers inspect from the file's own attributes; strip echoes the bytes."""

    HEALTH_MESSAGE = "Example metadata service is running"

    async def inspect(self, file: ImageFile) -> ImageMetadata:
        image_info = MetadataGroup(
            group_name="Image Information",
            data={"File Name": file.name, "MIME Type": file.mime_type},
            has_data=True,
        )
        return ImageMetadata(
            file_name=file.name,
            file_size=file.size,
            mime_type=file.mime_type,
            has_metadata=False,
            groups={"imageInfo": image_info},
        )

    async def strip(self, file: ImageFile) -> bytes:
        return file.content

    async def health(self) -> str:
        return self.HEALTH_MESSAGE
