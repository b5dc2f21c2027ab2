"""Filesystem object storage.

Copies uploaded media under ``settings.storage.media_dir`` and addresses it
through ``settings.storage.public_base_url``.
"""

import asyncio
from pathlib import Path
import shutil

from attrs import define, field

from ipstudio.config import get_logger, resilient_operation, settings
from ipstudio.domain.entities import MediaFile

logger = get_logger(__name__)


@define(slots=True)
class LocalObjectStorage:
    """Object storage backed by a local directory."""

    media_dir: Path = field(factory=lambda: settings.storage.media_dir, converter=Path)
    public_base_url: str = field(factory=lambda: settings.storage.public_base_url)

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url.rstrip('/')}/{key}"

    def _copy(self, source: Path, key: str) -> None:
        target = self.media_dir / key
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)

    @resilient_operation("object_storage_upload")
    async def upload(self, file: MediaFile, key: str) -> str:
        """Copy the file's bytes under ``key`` and return its public URL."""
        if file.path is None:
            raise FileNotFoundError(f"No local path for {file.name}")
        if not file.path.is_file():
            raise FileNotFoundError(f"File not found: {file.path}")

        await asyncio.to_thread(self._copy, file.path, key)
        logger.debug(f"Stored {file.name} as {key}")
        return self.url_for(key)
