from metastrip.codec.models import ImageFile
from metastrip.orchestrator.exceptions import FileTooLargeError, UnsupportedFileTypeError

ALLOWED_MIME_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/bmp",
)

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024


def validate_image_file(
    file: ImageFile,
    allowed_mime_types: tuple[str, ...] = ALLOWED_MIME_TYPES,
    max_size_bytes: int = MAX_FILE_SIZE_BYTES,
) -> None:
    """Check the declared type against the whitelist and the size ceiling.

    Raises:
        UnsupportedFileTypeError: if the type is not whitelisted.
        FileTooLargeError: if the file is larger than ``max_size_bytes``.
    """
    if file.mime_type not in allowed_mime_types:
        raise UnsupportedFileTypeError("Please select a valid image file (JPG, PNG, GIF, BMP)")
    if file.size > max_size_bytes:
        limit_mb = max_size_bytes // (1024 * 1024)
        raise FileTooLargeError(f"File size must be less than {limit_mb}MB")
