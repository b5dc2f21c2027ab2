"""Shared fixtures: media files, in-memory collaborators and a wired controller."""

import asyncio
from pathlib import Path
from typing import Any
from uuid import uuid4

import pytest

from ipstudio.application.form.controller import StudioCollaborators, UploadFormController
from ipstudio.application.services import MediaUploadService
from ipstudio.domain.entities import MediaFile

WALLET = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"
COLLABORATOR = "SP3FBR2AGK5H9QBDH3EEN6DF8EK8JY7RX8QJ5SVTE"

MEGABYTE = 1024 * 1024


class FakeStorage:
    """Object storage double.

    Files named in ``fail_names`` or stored at one of ``fail_paths`` fail every
    attempt.
    """

    def __init__(self, fail_names: set[str] | None = None) -> None:
        self.fail_names = set(fail_names or ())
        self.fail_paths: set[Path] = set()
        self.keys: list[str] = []
        self.gate: asyncio.Event | None = None

    async def upload(self, file: MediaFile, key: str) -> str:
        if self.gate is not None:
            await self.gate.wait()
        if file.name in self.fail_names or file.path in self.fail_paths:
            raise ConnectionError("storage offline")
        self.keys.append(key)
        return f"https://media.test/{key}"


class InMemorySubmissionRepository:
    """Submission store double that splits bundle items out like the real one."""

    def __init__(self) -> None:
        self.records: dict[str, dict[str, Any]] = {}
        self.items: dict[str, list[dict[str, Any]]] = {}
        self.fail_with: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def upsert_submission(self, payload: dict[str, Any]) -> str:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

        record_id = payload["id"]
        stored = dict(payload)
        metadata = stored.pop("track_metadata", None)
        if metadata is not None:
            urls = stored.pop("loop_files", None) or stored.pop("ep_files", None) or []
            self.items[record_id] = [
                {
                    "id": entry["id"] or uuid4().hex,
                    "title": entry["title"],
                    "bpm": entry["bpm"],
                    "position": entry["position"],
                    "media_url": urls[index] if index < len(urls) else None,
                }
                for index, entry in enumerate(metadata)
            ]
        self.records[record_id] = stored
        return record_id

    async def get_submission(self, record_id: str) -> dict[str, Any] | None:
        record = self.records.get(record_id)
        return dict(record) if record else None

    async def get_bundle_items(self, record_id: str) -> list[dict[str, Any]]:
        return sorted(self.items.get(record_id, []), key=lambda row: row["position"])


class InMemoryUnitOfWork:
    """Unit of work double sharing one repository across instances."""

    def __init__(self, repository: InMemorySubmissionRepository) -> None:
        self.repository = repository
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            await self.rollback()
        elif not self.committed:
            await self.commit()

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    def get_submission_repository(self) -> InMemorySubmissionRepository:
        return self.repository


@pytest.fixture
def wallet() -> str:
    return WALLET


@pytest.fixture
def make_file():
    """Factory for media file handles."""

    def _make(
        name: str = "loop.wav",
        size_mb: float = 1.0,
        duration: float | None = None,
        mime_type: str = "",
    ) -> MediaFile:
        return MediaFile(
            name=name,
            size_bytes=int(size_mb * MEGABYTE),
            mime_type=mime_type,
            duration_seconds=duration,
        )

    return _make


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def uploads(storage) -> MediaUploadService:
    return MediaUploadService(storage, retry_count=0, retry_base_delay=0, retry_max_delay=0)


@pytest.fixture
def repository() -> InMemorySubmissionRepository:
    return InMemorySubmissionRepository()


@pytest.fixture
def uow(repository) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(repository)


@pytest.fixture
def collaborators(uploads, repository) -> StudioCollaborators:
    return StudioCollaborators(
        uploads=uploads,
        uow_factory=lambda: InMemoryUnitOfWork(repository),
    )


@pytest.fixture
async def controller(collaborators, wallet) -> UploadFormController:
    return await UploadFormController.open(collaborators, wallet)
