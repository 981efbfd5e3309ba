from dataclasses import dataclass

from metastrip.codec.models import SerializedFile
from metastrip.remote.models import ImageMetadata


@dataclass(frozen=True)
class Session:
    """The single current file plus any metadata fetched for it."""

    file: SerializedFile
    metadata: ImageMetadata | None = None

    def to_record(self) -> dict[str, object]:
        return {
            "fileData": self.file.to_dict(),
            "metadata": self.metadata.to_dict() if self.metadata is not None else None,
        }

    @classmethod
    def from_record(cls, record: object) -> "Session":
        """Rebuild a Session from its durable record.

        Raises:
            ValueError: if the record does not match the stored schema.
        """
        if not isinstance(record, dict):
            raise ValueError("Session record must be an object")
        file_data = record.get("fileData")
        if not isinstance(file_data, dict):
            raise ValueError("Session record has no fileData")
        metadata = record.get("metadata")
        if metadata is not None and not isinstance(metadata, dict):
            raise ValueError("Session metadata must be an object or null")
        return cls(
            file=SerializedFile.from_dict(file_data),
            metadata=ImageMetadata.from_dict(metadata) if metadata is not None else None,
        )
