from dataclasses import dataclass


@dataclass(frozen=True)
class ImageFile:
    """In-memory file handed to the orchestrator by a picker."""

    name: str
    mime_type: str
    content: bytes
    last_modified: int = 0  # epoch milliseconds

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class SerializedFile:
    """Storable projection of an ImageFile.

    ``data_url`` embeds both the MIME type and the base64 payload:
    ``data:<mime>;base64,<payload>``.
    """

    name: str
    type: str
    size: int
    last_modified: int
    data_url: str

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "type": self.type,
            "size": self.size,
            "lastModified": self.last_modified,
            "dataUrl": self.data_url,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "SerializedFile":
        """Build from the persisted dict.

        Raises:
            ValueError: if a field is missing or has the wrong type.
        """
        try:
            name = payload["name"]
            mime_type = payload["type"]
            size = payload["size"]
            last_modified = payload["lastModified"]
            data_url = payload["dataUrl"]
        except KeyError as exc:
            raise ValueError(f"Serialized file is missing field {exc}") from exc
        if not isinstance(name, str) or not isinstance(mime_type, str):
            raise ValueError("Serialized file name and type must be strings")
        if not isinstance(data_url, str):
            raise ValueError("Serialized file dataUrl must be a string")
        if not isinstance(size, int) or not isinstance(last_modified, int):
            raise ValueError("Serialized file size and lastModified must be integers")
        return cls(
            name=name,
            type=mime_type,
            size=size,
            last_modified=last_modified,
            data_url=data_url,
        )
