"""Repository for submitted assets and their bundle items."""

from typing import Any
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ipstudio.config import get_logger
from ipstudio.domain.entities import ContentType
from ipstudio.domain.policy import rules_for
from ipstudio.infrastructure.persistence.database.db_models import (
    DBBundleItem,
    DBTrackSubmission,
)
from ipstudio.infrastructure.persistence.repositories.repo_decorator import db_operation

logger = get_logger(__name__)

TITLE_KEYS = ("title", "pack_title", "ep_title")


def _title(payload: dict[str, Any]) -> str:
    return next((payload[key] for key in TITLE_KEYS if payload.get(key)), "")


class SubmissionRepository:
    """Stores the flat submission payload plus one row per bundle item.

    Bundle item metadata and media URLs are split out of the payload into
    ``bundle_items`` rows; ``get_submission`` returns the payload without them.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @db_operation("upsert_submission")
    async def upsert_submission(self, payload: dict[str, Any]) -> str:
        """Insert or replace a submission and its bundle items.

        Items keep their stable id; new items get a fresh one. Items no longer
        in the payload are deleted.
        """
        record_id = str(payload.get("id") or uuid4())
        content_type = ContentType(payload["content_type"])
        stored = dict(payload, id=record_id)

        metadata: list[dict[str, Any]] = []
        media_urls: list[str | None] = []
        if content_type.is_bundle:
            metadata = stored.pop("track_metadata", None) or []
            media_urls = stored.pop(rules_for(content_type).media_field, None) or []

        record = await self.session.get(DBTrackSubmission, record_id)
        values = {
            "content_type": content_type.value,
            "title": _title(stored),
            "artist": stored.get("artist") or "",
            "uploader_wallet": stored.get("uploader_wallet"),
            "price_stx": stored.get("price_stx"),
            "payload": stored,
        }
        if record is None:
            self.session.add(DBTrackSubmission(id=record_id, **values))
            logger.debug(f"Inserting submission {record_id}")
        else:
            for key, value in values.items():
                setattr(record, key, value)
            logger.debug(f"Updating submission {record_id}")

        if content_type.is_bundle:
            await self._replace_items(record_id, metadata, media_urls)

        await self.session.flush()
        return record_id

    async def _replace_items(
        self,
        record_id: str,
        metadata: list[dict[str, Any]],
        media_urls: list[str | None],
    ) -> None:
        result = await self.session.execute(
            select(DBBundleItem).where(DBBundleItem.submission_id == record_id)
        )
        existing = {row.id: row for row in result.scalars()}
        kept: set[str] = set()

        for index, entry in enumerate(metadata):
            url = media_urls[index] if index < len(media_urls) else None
            item_id = entry.get("id")
            row = existing.get(item_id) if item_id else None

            if row is None:
                row = DBBundleItem(id=str(item_id or uuid4()), submission_id=record_id)
                self.session.add(row)
            row.title = entry.get("title") or ""
            row.bpm = entry.get("bpm")
            row.position = entry.get("position") or index + 1
            if url:
                row.media_url = url
            kept.add(row.id)

        removed = set(existing) - kept
        if removed:
            await self.session.execute(delete(DBBundleItem).where(DBBundleItem.id.in_(removed)))
            logger.debug(f"Removed {len(removed)} bundle items from {record_id}")

    @db_operation("get_submission")
    async def get_submission(self, record_id: str) -> dict[str, Any] | None:
        record = await self.session.get(DBTrackSubmission, record_id)
        if record is None:
            return None
        return dict(record.payload, id=record.id)

    @db_operation("get_bundle_items")
    async def get_bundle_items(self, record_id: str) -> list[dict[str, Any]]:
        result = await self.session.execute(
            select(DBBundleItem)
            .where(DBBundleItem.submission_id == record_id)
            .order_by(DBBundleItem.position)
        )
        return [
            {
                "id": row.id,
                "title": row.title,
                "bpm": row.bpm,
                "position": row.position,
                "media_url": row.media_url,
            }
            for row in result.scalars()
        ]
