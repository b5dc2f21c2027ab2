"""Concurrent media uploads with retry and in-flight tracking.

Each file is uploaded independently so one failure never blocks the others.
Failed uploads surface as per-file ``UploadError`` results the caller can
retry. The in-flight counter backs the form's navigation guard.
"""

import asyncio
from collections.abc import Sequence
from typing import Any
from uuid import uuid4

import backoff
from attrs import define, field

from ipstudio.config import get_logger, settings
from ipstudio.domain.entities import MediaFile
from ipstudio.domain.exceptions import UploadError, describe_error
from ipstudio.domain.repositories import ObjectStorageProtocol

logger = get_logger(__name__)


def storage_key(file: MediaFile, folder: str) -> str:
    """Unique object key preserving the file's extension."""
    return f"{folder}/{uuid4().hex}{file.extension}"


@define(slots=True)
class MediaUploadService:
    """Uploads media files to object storage with exponential backoff.

    Attributes:
        storage: Object storage collaborator
        retry_count: Maximum number of retry attempts per file
        retry_base_delay: Base delay between retries (seconds)
        retry_max_delay: Maximum delay between retries (seconds)
    """

    storage: ObjectStorageProtocol
    retry_count: int = field(factory=lambda: settings.uploads.upload_retry_count)
    retry_base_delay: float = field(factory=lambda: settings.uploads.upload_retry_base_delay)
    retry_max_delay: float = field(factory=lambda: settings.uploads.upload_retry_max_delay)
    _in_flight: int = field(default=0, init=False)

    @property
    def in_flight(self) -> int:
        """Number of uploads currently running."""
        return self._in_flight

    @property
    def is_uploading(self) -> bool:
        return self._in_flight > 0

    def _on_backoff(self, details: dict[str, Any]) -> None:
        """Log backoff event."""
        file = details["args"][0] if details["args"] else None
        logger.warning(
            f"Backing off upload (attempt {details['tries']})",
            retry_delay=f"{details['wait']:.2f}s",
            file=getattr(file, "name", None),
        )

    def _on_giveup(self, details: dict[str, Any]) -> None:
        """Log when we give up retrying."""
        exception = details.get("exception")
        logger.error(
            f"All {details['tries']} upload attempts failed",
            elapsed_time=f"{details['elapsed']:.2f}s",
            error=str(exception) if exception else "Unknown error",
        )

    async def upload(self, file: MediaFile, folder: str = "audio") -> str:
        """Upload one file, retrying transient failures.

        Returns:
            Public URL of the stored object

        Raises:
            UploadError: When every attempt failed.
        """

        @backoff.on_exception(
            backoff.expo,
            Exception,
            max_tries=self.retry_count + 1,  # +1 because first attempt counts
            factor=self.retry_base_delay,
            max_value=self.retry_max_delay,
            jitter=backoff.full_jitter,
            on_backoff=self._on_backoff,
            on_giveup=self._on_giveup,
        )
        async def upload_with_backoff(media: MediaFile) -> str:
            return await self.storage.upload(media, storage_key(media, folder))

        self._in_flight += 1
        try:
            url = await upload_with_backoff(file)
        except Exception as e:
            raise UploadError(file.name, describe_error(e)) from e
        finally:
            self._in_flight -= 1

        logger.debug(f"Uploaded {file.name}", url=url)
        return url

    async def upload_many(
        self, files: Sequence[MediaFile], folder: str = "audio"
    ) -> list[str | UploadError]:
        """Upload files concurrently.

        Returns:
            One entry per input file, in input order: the public URL on
            success, the ``UploadError`` on failure.
        """
        if not files:
            return []

        with logger.contextualize(operation="upload_media", file_count=len(files)):
            results = await asyncio.gather(
                *[self.upload(file, folder) for file in files],
                return_exceptions=True,
            )

            outcomes: list[str | UploadError] = []
            for file, result in zip(files, results, strict=True):
                match result:
                    case str() as url:
                        outcomes.append(url)
                    case UploadError() as error:
                        outcomes.append(error)
                    case BaseException() as error:
                        outcomes.append(UploadError(file.name, describe_error(error)))

            failed = sum(isinstance(o, UploadError) for o in outcomes)
            if failed:
                logger.warning(f"{failed} of {len(files)} uploads failed")
            else:
                logger.info(f"Uploaded {len(files)} files")

        return outcomes
