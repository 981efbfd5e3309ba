import io

import pytest
from PIL import Image

from metastrip.codec.models import ImageFile


def _image_bytes(fmt: str, size: tuple[int, int] = (8, 8), **save_kwargs: object) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 40, 40)).save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


@pytest.fixture()
def sample_jpeg_bytes() -> bytes:
    """A small JPEG carrying an EXIF block with a camera model."""
    exif = Image.Exif()
    exif[0x0110] = "Test Camera"
    return _image_bytes("JPEG", exif=exif.tobytes())


@pytest.fixture()
def sample_png_bytes() -> bytes:
    return _image_bytes("PNG")


@pytest.fixture()
def jpeg_file(sample_jpeg_bytes: bytes) -> ImageFile:
    return ImageFile(
        name="holiday.jpg",
        mime_type="image/jpeg",
        content=sample_jpeg_bytes,
        last_modified=1_700_000_000_000,
    )


@pytest.fixture()
def png_file(sample_png_bytes: bytes) -> ImageFile:
    return ImageFile(
        name="diagram.png",
        mime_type="image/png",
        content=sample_png_bytes,
        last_modified=1_700_000_500_000,
    )
