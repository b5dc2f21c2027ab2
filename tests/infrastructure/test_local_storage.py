"""Tests for filesystem object storage."""

import pytest

from ipstudio.domain.entities import MediaFile
from ipstudio.infrastructure.storage import LocalObjectStorage


class TestLocalObjectStorage:
    @pytest.fixture
    def storage(self, tmp_path):
        return LocalObjectStorage(tmp_path / "media", "https://cdn.test/media/")

    async def test_upload_copies_bytes(self, storage, tmp_path):
        source = tmp_path / "loop.wav"
        source.write_bytes(b"RIFF0000")
        file = MediaFile(name="loop.wav", size_bytes=8, path=source)

        url = await storage.upload(file, "audio/abc.wav")

        assert url == "https://cdn.test/media/audio/abc.wav"
        assert (tmp_path / "media" / "audio" / "abc.wav").read_bytes() == b"RIFF0000"

    async def test_missing_file(self, storage, tmp_path):
        file = MediaFile(name="gone.wav", size_bytes=1, path=tmp_path / "gone.wav")

        with pytest.raises(FileNotFoundError):
            await storage.upload(file, "audio/gone.wav")

    async def test_file_without_path(self, storage):
        with pytest.raises(FileNotFoundError, match="No local path"):
            await storage.upload(MediaFile(name="x.wav", size_bytes=1), "audio/x.wav")
