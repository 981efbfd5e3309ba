import os
from pathlib import Path

import httpx
import pytest

from metastrip.pickers.dropbox_picker import DropboxPicker
from metastrip.pickers.exceptions import PickerError
from metastrip.pickers.google_drive_picker import GoogleDrivePicker
from metastrip.pickers.local_picker import LocalFilePicker


class TestLocalFilePicker:
    @pytest.mark.asyncio
    async def test_reads_file_with_guessed_type(
        self, tmp_path: Path, sample_png_bytes: bytes
    ) -> None:
        path = tmp_path / "diagram.png"
        path.write_bytes(sample_png_bytes)
        os.utime(path, (1_700_000_000, 1_700_000_000))

        file = await LocalFilePicker(path).choose()

        assert file is not None
        assert file.name == "diagram.png"
        assert file.mime_type == "image/png"
        assert file.content == sample_png_bytes
        assert file.last_modified == 1_700_000_000_000

    @pytest.mark.asyncio
    async def test_unknown_extension_has_empty_type(self, tmp_path: Path) -> None:
        path = tmp_path / "mystery.zzz-unknown"
        path.write_bytes(b"data")
        file = await LocalFilePicker(path).choose()
        assert file is not None
        assert file.mime_type == ""

    @pytest.mark.asyncio
    async def test_missing_file_raises_picker_error(self, tmp_path: Path) -> None:
        with pytest.raises(PickerError, match="missing.jpg"):
            await LocalFilePicker(tmp_path / "missing.jpg").choose()


class TestGoogleDrivePicker:
    @pytest.mark.asyncio
    async def test_downloads_with_bearer_token(self, sample_jpeg_bytes: bytes) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=sample_jpeg_bytes)

        picker = GoogleDrivePicker(
            file_id="abc123",
            file_name="holiday.jpg",
            mime_type="image/jpeg",
            access_token="token-1",
            transport=httpx.MockTransport(handler),
        )
        file = await picker.choose()

        assert file is not None
        assert file.content == sample_jpeg_bytes
        assert file.mime_type == "image/jpeg"
        assert seen[0].url.path == "/drive/v3/files/abc123"
        assert seen[0].url.params["alt"] == "media"
        assert seen[0].headers["Authorization"] == "Bearer token-1"

    @pytest.mark.asyncio
    async def test_falls_back_to_response_content_type(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"gif", headers={"Content-Type": "image/gif"})

        picker = GoogleDrivePicker(
            file_id="x",
            file_name="a.gif",
            mime_type="",
            access_token="t",
            transport=httpx.MockTransport(handler),
        )
        file = await picker.choose()
        assert file is not None
        assert file.mime_type == "image/gif"

    @pytest.mark.asyncio
    async def test_http_error_raises_picker_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403)

        picker = GoogleDrivePicker(
            file_id="x",
            file_name="a.jpg",
            mime_type="image/jpeg",
            access_token="t",
            transport=httpx.MockTransport(handler),
        )
        with pytest.raises(PickerError, match="Google Drive download failed"):
            await picker.choose()

    @pytest.mark.asyncio
    async def test_file_id_is_quoted_into_path(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"x")

        picker = GoogleDrivePicker(
            file_id="a/b c",
            file_name="a.jpg",
            mime_type="image/jpeg",
            access_token="t",
            transport=httpx.MockTransport(handler),
        )
        await picker.choose()

        assert seen[0].url.raw_path.startswith(b"/drive/v3/files/a%2Fb%20c")

    @pytest.mark.asyncio
    async def test_oversized_download_raises_picker_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"12345")

        picker = GoogleDrivePicker(
            file_id="x",
            file_name="a.jpg",
            mime_type="image/jpeg",
            access_token="t",
            max_size_bytes=4,
            transport=httpx.MockTransport(handler),
        )
        with pytest.raises(PickerError, match="exceeds 4 bytes"):
            await picker.choose()

    @pytest.mark.asyncio
    async def test_missing_token_raises_picker_error(self) -> None:
        picker = GoogleDrivePicker(
            file_id="x", file_name="a.jpg", mime_type="image/jpeg", access_token=""
        )
        with pytest.raises(PickerError, match="no access token"):
            await picker.choose()


class TestDropboxPicker:
    @pytest.mark.asyncio
    async def test_takes_type_from_response(self, sample_png_bytes: bytes) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content=sample_png_bytes,
                headers={"Content-Type": "image/png; charset=binary"},
            )

        picker = DropboxPicker(
            link="https://dl.dropboxusercontent.com/s/abc/My%20Photo.png",
            transport=httpx.MockTransport(handler),
        )
        file = await picker.choose()

        assert file is not None
        assert file.name == "My Photo.png"
        assert file.mime_type == "image/png"
        assert file.content == sample_png_bytes

    @pytest.mark.asyncio
    async def test_explicit_name_wins(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"x", headers={"Content-Type": "image/bmp"})

        picker = DropboxPicker(
            link="https://dl.dropboxusercontent.com/s/abc/file",
            file_name="scan.bmp",
            transport=httpx.MockTransport(handler),
        )
        file = await picker.choose()
        assert file is not None
        assert file.name == "scan.bmp"

    @pytest.mark.asyncio
    async def test_http_error_raises_picker_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        picker = DropboxPicker(
            link="https://dl.dropboxusercontent.com/s/abc/gone.png",
            transport=httpx.MockTransport(handler),
        )
        with pytest.raises(PickerError, match="Dropbox download failed"):
            await picker.choose()

    @pytest.mark.asyncio
    async def test_download_at_size_limit_is_accepted(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"1234", headers={"Content-Type": "image/png"})

        picker = DropboxPicker(
            link="https://dl.dropboxusercontent.com/s/abc/tiny.png",
            max_size_bytes=4,
            transport=httpx.MockTransport(handler),
        )
        file = await picker.choose()
        assert file is not None
        assert file.content == b"1234"

    @pytest.mark.asyncio
    async def test_oversized_download_raises_picker_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"12345", headers={"Content-Type": "image/png"})

        picker = DropboxPicker(
            link="https://dl.dropboxusercontent.com/s/abc/big.png",
            max_size_bytes=4,
            transport=httpx.MockTransport(handler),
        )
        with pytest.raises(PickerError, match="Dropbox download failed"):
            await picker.choose()
