"""SQLAlchemy database models for the submission store.

One row per registered asset, holding the flat submission payload, plus one
row per bundle item for loop packs and EPs.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db_connection import Base


class TimestampMixin:
    """Creation and update timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


class DBTrackSubmission(TimestampMixin, Base):
    """A registered asset. ``payload`` is the flat record written by the flow."""

    __tablename__ = "track_submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    content_type: Mapped[str] = mapped_column(String(32), index=True)
    title: Mapped[str] = mapped_column(String(255))
    artist: Mapped[str] = mapped_column(String(255))
    uploader_wallet: Mapped[str | None] = mapped_column(String(128), index=True)
    price_stx: Mapped[float | None] = mapped_column(Float)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    # Relationships
    items: Mapped[list["DBBundleItem"]] = relationship(
        back_populates="submission",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DBBundleItem.position",
    )


class DBBundleItem(TimestampMixin, Base):
    """One loop or song inside a loop pack or EP."""

    __tablename__ = "bundle_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    submission_id: Mapped[str] = mapped_column(
        ForeignKey("track_submissions.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(255))
    bpm: Mapped[int | None] = mapped_column(Integer)
    position: Mapped[int] = mapped_column(Integer)
    media_url: Mapped[str | None] = mapped_column(String(1024))

    submission: Mapped["DBTrackSubmission"] = relationship(back_populates="items")
