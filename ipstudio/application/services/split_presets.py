"""Saved split presets: reusable contributor splits per identity.

At most ``settings.presets.max_presets`` presets are kept, newest first;
saving beyond the limit drops the oldest.
"""

from datetime import UTC, datetime
from uuid import uuid4

import attrs
from attrs import define, field

from ipstudio.config import get_logger, settings
from ipstudio.domain.entities import (
    ContentType,
    LoopCategory,
    SplitGroup,
    SplitPreset,
    TrackSubmission,
)
from ipstudio.domain.repositories import SplitPresetStoreProtocol

logger = get_logger(__name__)


@define(slots=True)
class SplitPresetService:
    """Manage split presets through a preset store."""

    store: SplitPresetStoreProtocol
    max_presets: int = field(factory=lambda: settings.presets.max_presets)

    async def list_presets(self, identity: str) -> list[SplitPreset]:
        presets = await self.store.load(identity)
        return sorted(presets, key=lambda p: p.created_at, reverse=True)

    async def save_preset(
        self,
        identity: str,
        name: str,
        composition: SplitGroup,
        production: SplitGroup,
        description: str = "",
        default_content_type: ContentType | None = None,
        default_loop_category: LoopCategory | None = None,
    ) -> SplitPreset:
        """Save a new preset, evicting the oldest beyond the limit."""
        preset = SplitPreset(
            name=name,
            composition=composition,
            production=production,
            id=f"preset_{uuid4().hex[:12]}",
            description=description,
            default_content_type=default_content_type,
            default_loop_category=default_loop_category,
            created_at=datetime.now(UTC),
        )
        existing = await self.list_presets(identity)
        kept = [preset, *existing][: self.max_presets]
        if len(existing) + 1 > len(kept):
            logger.info(f"Preset limit reached, dropping {len(existing) + 1 - len(kept)} oldest")

        await self.store.save(identity, kept)
        return preset

    async def save_from_submission(
        self, identity: str, name: str, submission: TrackSubmission, description: str = ""
    ) -> SplitPreset:
        """Capture a draft's splits and content defaults as a preset."""
        return await self.save_preset(
            identity,
            name,
            submission.composition,
            submission.production,
            description=description,
            default_content_type=submission.content_type,
            default_loop_category=submission.loop_category,
        )

    async def delete_preset(self, identity: str, preset_id: str) -> bool:
        presets = await self.list_presets(identity)
        remaining = [p for p in presets if p.id != preset_id]
        if len(remaining) == len(presets):
            return False
        await self.store.save(identity, remaining)
        return True

    async def update_preset(
        self, identity: str, preset_id: str, **changes
    ) -> SplitPreset | None:
        """Update a preset in place. Its id and creation time never change."""
        changes.pop("id", None)
        changes.pop("created_at", None)

        presets = await self.list_presets(identity)
        for index, preset in enumerate(presets):
            if preset.id == preset_id:
                presets[index] = attrs.evolve(preset, **changes)
                await self.store.save(identity, presets)
                return presets[index]
        return None


def apply_preset(submission: TrackSubmission, preset: SplitPreset) -> TrackSubmission:
    """Copy a preset's splits, and any content defaults it carries, onto a draft."""
    changes: dict = {
        "composition": preset.composition,
        "production": preset.production,
    }
    if preset.default_content_type:
        changes["content_type"] = preset.default_content_type
    if preset.default_loop_category:
        changes["loop_category"] = preset.default_loop_category
    return submission.with_fields(**changes)
