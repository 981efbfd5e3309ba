from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MetadataGroup:
    """A named group of metadata key/value pairs (camera, location, ...)."""

    group_name: str
    data: dict[str, str] = field(default_factory=dict)
    has_data: bool = False


@dataclass(frozen=True)
class ImageMetadata:
    """Inspect result returned by the remote service."""

    file_name: str
    file_size: int
    mime_type: str
    has_metadata: bool
    exif_data: dict[str, str] = field(default_factory=dict)
    groups: dict[str, MetadataGroup] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "ImageMetadata":
        """Parse the service's JSON body.

        Raises:
            ValueError: if a required field is missing or mistyped.
        """
        try:
            file_name = payload["fileName"]
            file_size = payload["fileSize"]
            mime_type = payload["mimeType"]
            has_metadata = payload["hasMetadata"]
        except KeyError as exc:
            raise ValueError(f"Metadata response is missing field {exc}") from exc
        if not isinstance(file_name, str) or not isinstance(mime_type, str):
            raise ValueError("fileName and mimeType must be strings")
        if not isinstance(file_size, int) or not isinstance(has_metadata, bool):
            raise ValueError("fileSize must be an integer and hasMetadata a boolean")

        groups: dict[str, MetadataGroup] = {}
        for key, value in payload.items():
            if isinstance(value, dict) and "groupName" in value and "data" in value:
                groups[key] = MetadataGroup(
                    group_name=str(value["groupName"]),
                    data=_string_map(value.get("data")),
                    has_data=bool(value.get("hasData", False)),
                )

        return cls(
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
            has_metadata=has_metadata,
            exif_data=_string_map(payload.get("exifData")),
            groups=groups,
        )

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "mimeType": self.mime_type,
            "hasMetadata": self.has_metadata,
            "exifData": dict(self.exif_data),
        }
        for key, group in self.groups.items():
            payload[key] = {
                "groupName": group.group_name,
                "data": dict(group.data),
                "hasData": group.has_data,
            }
        return payload

    def populated_groups(self) -> Iterator[tuple[str, MetadataGroup]]:
        for key, group in self.groups.items():
            if group.has_data:
                yield key, group


def _string_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): "" if v is None else str(v) for k, v in value.items()}
