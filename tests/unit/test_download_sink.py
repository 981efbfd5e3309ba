from pathlib import Path

import pytest

from metastrip.orchestrator.download import DirectoryDownloadSink, cleaned_filename
from metastrip.orchestrator.exceptions import DownloadError


class TestCleanedFilename:
    def test_adds_prefix(self) -> None:
        assert cleaned_filename("holiday.jpg") == "cleaned_holiday.jpg"

    def test_strips_directories(self) -> None:
        assert cleaned_filename("../../etc/photo.png") == "cleaned_photo.png"
        assert cleaned_filename("C:\\Users\\me\\photo.png") == "cleaned_photo.png"


class TestDirectoryDownloadSink:
    @pytest.mark.asyncio
    async def test_creates_directory_and_writes(self, tmp_path: Path) -> None:
        sink = DirectoryDownloadSink(tmp_path / "downloads")

        path = await sink.save("cleaned_a.png", b"clean")

        assert path == tmp_path / "downloads" / "cleaned_a.png"
        assert path.read_bytes() == b"clean"

    @pytest.mark.asyncio
    async def test_write_failure_raises_download_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"not a directory")
        sink = DirectoryDownloadSink(blocker)

        with pytest.raises(DownloadError, match="cleaned_a.png"):
            await sink.save("cleaned_a.png", b"clean")
