"""Ordered per-item metadata for loop packs and EPs.

Positions are never stored on the live list; they are derived from list order
when the bundle is handed to persistence.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from attrs import define, field

from ipstudio.domain.entities import BundleItem, MediaFile


@define(slots=True)
class BatchTrackOrdering:
    """Mutable, ordered collection of bundle items owned by the form."""

    _items: list[BundleItem] = field(factory=list, alias="items")

    @classmethod
    def from_files(cls, files: Iterable[MediaFile]) -> "BatchTrackOrdering":
        ordering = cls()
        ordering.init_from_files(files)
        return ordering

    @classmethod
    def from_persisted(cls, rows: Iterable[Mapping[str, Any]]) -> "BatchTrackOrdering":
        """Hydrate items from stored rows, ordered by their stored position.

        Persisted items carry their stable id and no source file.
        """
        ordered = sorted(rows, key=lambda row: row.get("position") or 0)
        return cls(
            items=[
                BundleItem(
                    title=row.get("title") or "",
                    bpm=row.get("bpm"),
                    stable_id=str(row["id"]),
                    position=row.get("position") or index,
                    source_file=None,
                    media_url=row.get("media_url") or row.get("audio_url"),
                )
                for index, row in enumerate(ordered, start=1)
            ]
        )

    def init_from_files(self, files: Iterable[MediaFile]) -> None:
        """Replace the collection with one new item per file, in file order."""
        self._items = [
            BundleItem(title=file.default_title, source_file=file, position=index)
            for index, file in enumerate(files, start=1)
        ]

    @property
    def items(self) -> Sequence[BundleItem]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def _swap(self, a: int, b: int) -> None:
        self._items[a], self._items[b] = self._items[b], self._items[a]

    def move_up(self, index: int) -> None:
        """Swap with the previous item. No-op for the first item."""
        if 0 < index < len(self._items):
            self._swap(index, index - 1)

    def move_down(self, index: int) -> None:
        """Swap with the next item. No-op for the last item."""
        if 0 <= index < len(self._items) - 1:
            self._swap(index, index + 1)

    def edit_title(self, index: int, title: str) -> None:
        self._items[index] = self._items[index].with_title(title)

    def edit_bpm(self, index: int, bpm: float | None) -> None:
        self._items[index] = self._items[index].with_bpm(bpm)

    def index_of(self, source_file: MediaFile) -> int | None:
        """Current index of the item holding ``source_file``, None once removed."""
        for index, item in enumerate(self._items):
            if item.source_file is source_file:
                return index
        return None

    def mark_uploaded(self, source_file: MediaFile, url: str) -> bool:
        """Record the URL for the item holding ``source_file``, wherever it now sits."""
        index = self.index_of(source_file)
        if index is None:
            return False
        self._items[index] = self._items[index].with_media_url(url)
        return True

    def remove(self, index: int) -> BundleItem:
        return self._items.pop(index)

    def clear(self) -> None:
        self._items.clear()

    def pending_uploads(self) -> list[tuple[int, BundleItem]]:
        """Items whose bytes still need to reach object storage."""
        return [
            (index, item)
            for index, item in enumerate(self._items)
            if item.source_file is not None and not item.is_uploaded
        ]

    def to_submission_metadata(self) -> list[dict[str, Any]]:
        """Per-item metadata with 1-indexed positions from the current order."""
        return [
            {
                "id": item.stable_id,
                "title": item.title,
                "bpm": item.bpm,
                "position": position,
            }
            for position, item in enumerate(self._items, start=1)
        ]

    def media_urls(self) -> list[str | None]:
        """Stored media URL per item, aligned with ``to_submission_metadata``."""
        return [item.media_url for item in self._items]
