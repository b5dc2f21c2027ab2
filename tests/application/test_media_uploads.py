"""Tests for concurrent media uploads with retry."""

import asyncio

import pytest

from ipstudio.application.services import MediaUploadService, storage_key
from ipstudio.domain.exceptions import UploadError


class FlakyStorage:
    """Fails the first ``failures`` attempts, then succeeds."""

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.attempts = 0

    async def upload(self, file, key):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise TimeoutError("upload timed out")
        return f"https://media.test/{key}"


class TestMediaUploadService:
    async def test_upload_returns_url(self, uploads, storage, make_file):
        url = await uploads.upload(make_file("keys.wav"), "audio")

        assert url.startswith("https://media.test/audio/")
        assert url.endswith(".wav")
        assert not uploads.is_uploading

    async def test_transient_failures_are_retried(self, make_file):
        storage = FlakyStorage(failures=2)
        service = MediaUploadService(storage, retry_count=2, retry_base_delay=0, retry_max_delay=0)

        url = await service.upload(make_file("keys.wav"))

        assert storage.attempts == 3
        assert url.startswith("https://media.test/")

    async def test_exhausted_retries_raise_upload_error(self, make_file):
        service = MediaUploadService(
            FlakyStorage(failures=5), retry_count=1, retry_base_delay=0, retry_max_delay=0
        )

        with pytest.raises(UploadError) as exc_info:
            await service.upload(make_file("keys.wav"))

        assert exc_info.value.file_name == "keys.wav"
        assert exc_info.value.reason == "upload timed out"

    async def test_one_failure_does_not_block_others(self, uploads, storage, make_file):
        storage.fail_names = {"b.wav"}
        files = [make_file("a.wav"), make_file("b.wav"), make_file("c.wav")]

        outcomes = await uploads.upload_many(files, "loop_pack")

        assert isinstance(outcomes[0], str)
        assert isinstance(outcomes[1], UploadError)
        assert outcomes[1].reason == "storage offline"
        assert isinstance(outcomes[2], str)

    async def test_in_flight_counter(self, uploads, storage, make_file):
        storage.gate = asyncio.Event()

        task = asyncio.create_task(uploads.upload_many([make_file("a.wav"), make_file("b.wav")]))
        while uploads.in_flight < 2:
            await asyncio.sleep(0)

        assert uploads.is_uploading
        storage.gate.set()
        await task
        assert uploads.in_flight == 0

    async def test_upload_many_empty(self, uploads):
        assert await uploads.upload_many([]) == []


def test_storage_key_keeps_extension(make_file):
    key = storage_key(make_file("Take 3.MP3"), "audio")

    assert key.startswith("audio/")
    assert key.endswith(".mp3")
