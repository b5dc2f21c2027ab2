"""Tests for saved split presets."""

import pytest

from ipstudio.application.services import SplitPresetService, apply_preset
from ipstudio.domain.entities import (
    ContentType,
    LoopCategory,
    RightsCategory,
    SplitGroup,
    TrackSubmission,
)

IDENTITY = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"


class MemoryPresetStore:
    def __init__(self) -> None:
        self.data: dict[str, list] = {}

    async def load(self, identity):
        return list(self.data.get(identity, []))

    async def save(self, identity, presets):
        self.data[identity] = list(presets)


@pytest.fixture
def service():
    return SplitPresetService(MemoryPresetStore(), max_presets=3)


def duo() -> tuple[SplitGroup, SplitGroup]:
    composition = (
        SplitGroup.solo(RightsCategory.COMPOSITION, "a")
        .with_wallet(1, "b")
        .with_percentages([60, 40, 0])
    )
    return composition, SplitGroup.solo(RightsCategory.PRODUCTION, "a")


class TestSplitPresetService:
    async def test_newest_first_and_oldest_evicted(self, service):
        composition, production = duo()
        for name in ["one", "two", "three", "four"]:
            await service.save_preset(IDENTITY, name, composition, production)

        presets = await service.list_presets(IDENTITY)

        assert [p.name for p in presets] == ["four", "three", "two"]

    async def test_delete(self, service):
        composition, production = duo()
        preset = await service.save_preset(IDENTITY, "duo", composition, production)

        assert await service.delete_preset(IDENTITY, preset.id)
        assert not await service.delete_preset(IDENTITY, preset.id)
        assert await service.list_presets(IDENTITY) == []

    async def test_update_keeps_identity_fields(self, service):
        composition, production = duo()
        preset = await service.save_preset(IDENTITY, "duo", composition, production)

        updated = await service.update_preset(
            IDENTITY, preset.id, name="renamed", id="other", created_at=None
        )

        assert updated.name == "renamed"
        assert updated.id == preset.id
        assert updated.created_at == preset.created_at

    async def test_update_unknown_preset(self, service):
        assert await service.update_preset(IDENTITY, "missing", name="x") is None

    async def test_save_from_submission_captures_defaults(self, service):
        draft = TrackSubmission(content_type=ContentType.LOOP, loop_category=LoopCategory.VOCAL)

        preset = await service.save_from_submission(IDENTITY, "vocals", draft)

        assert preset.default_content_type is ContentType.LOOP
        assert preset.default_loop_category is LoopCategory.VOCAL


async def test_apply_preset_copies_splits(service):
    composition, production = duo()
    preset = await service.save_preset(
        IDENTITY, "duo", composition, production, default_content_type=ContentType.FULL_SONG
    )

    draft = apply_preset(TrackSubmission(), preset)

    assert draft.composition.slots[1].wallet == "b"
    assert draft.composition.total == 100
    assert draft.content_type is ContentType.FULL_SONG
