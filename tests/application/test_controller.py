"""Tests for the authoring flow state machine."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from ipstudio.application.form import FlowState
from ipstudio.application.form.controller import UploadFormController
from ipstudio.domain.entities import (
    BpmDetection,
    ContentType,
    Location,
    LoopCategory,
    MediaFile,
    RightsCategory,
    SplitGroup,
    SplitPreset,
    UploadMode,
    VideoCrop,
)
from ipstudio.domain.exceptions import (
    AuthenticationError,
    PersistenceError,
    SubmissionInProgressError,
    ValidationError,
)

COLLABORATOR = "SP3FBR2AGK5H9QBDH3EEN6DF8EK8JY7RX8QJ5SVTE"


async def _settle(predicate, attempts: int = 50) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)


class TestOpen:
    async def test_requires_identity(self, collaborators):
        with pytest.raises(AuthenticationError, match="sign in"):
            await UploadFormController.open(collaborators, "  ")

    async def test_new_asset_starts_in_quick_mode(self, controller, wallet):
        assert controller.mode is UploadMode.QUICK
        assert controller.content_type is ContentType.LOOP
        assert controller.state is FlowState.BASIC_INFO
        assert controller.submission.loop_category is LoopCategory.INSTRUMENTAL
        assert controller.submission.composition.slots[0].wallet == wallet

    async def test_blocking_fields_clear_once_filled(self, controller):
        assert controller.blocking_fields() == ["title", "artist"]

        controller.update(title="Dusty", artist="Kai")

        assert controller.can_advance

    async def test_unknown_fields_rejected(self, controller):
        with pytest.raises(ValueError, match="Unknown draft fields"):
            controller.update(price=5)


class TestNavigation:
    async def test_video_skips_release_step(self, controller):
        controller.set_content_type(ContentType.VIDEO_CLIP)
        controller.set_mode(UploadMode.ADVANCED)

        controller.next()
        controller.next()
        assert controller.next() is FlowState.FILE_UPLOADS
        assert controller.prev() is FlowState.PRODUCTION_SPLITS

    async def test_next_and_prev_are_bounded(self, controller):
        assert controller.prev() is FlowState.BASIC_INFO
        assert controller.is_first_step

        controller.go_to_step(len(controller.steps) - 1)

        assert controller.next() is FlowState.REVIEW
        assert controller.is_last_step

    async def test_jump_onto_skipped_step_is_ignored(self, controller):
        controller.set_content_type(ContentType.VIDEO_CLIP)
        controller.set_mode(UploadMode.ADVANCED)
        controller.go_to_step(2)

        assert controller.go_to_step(3) is FlowState.PRODUCTION_SPLITS
        assert controller.go_to_step(4) is FlowState.FILE_UPLOADS

    async def test_switching_to_quick_restores_defaults(self, controller, wallet):
        controller.set_mode(UploadMode.ADVANCED)
        controller.next()
        controller.set_split_wallet(RightsCategory.COMPOSITION, 1, COLLABORATOR)

        controller.set_mode(UploadMode.QUICK)

        assert controller.step_index == 0
        composition = controller.submission.composition
        assert composition.active_indices == [0]
        assert composition.slots[0].wallet == wallet
        assert composition.total == 100


class TestDraftEdits:
    async def test_adding_contributors_rebalances(self, controller):
        controller.set_split_wallet(RightsCategory.COMPOSITION, 1, COLLABORATOR)
        assert [s.percentage for s in controller.submission.composition.slots] == [50, 50, 0]

        controller.set_split_wallet(RightsCategory.COMPOSITION, 2, "Mira")
        assert [s.percentage for s in controller.submission.composition.slots] == [34, 33, 33]

        controller.set_split_wallet(RightsCategory.COMPOSITION, 2, "")
        assert [s.percentage for s in controller.submission.composition.slots] == [50, 50, 0]

    async def test_manual_percentage_never_rebalances(self, controller):
        controller.set_split_percentage(RightsCategory.PRODUCTION, 0, 70)

        assert controller.split_total(RightsCategory.PRODUCTION) == 70

    async def test_switching_type_clears_loop_fields(self, controller):
        controller.update(loop_category="stem", tell_us_more="Drums", bpm=120)

        controller.set_content_type(ContentType.EP)

        draft = controller.submission
        assert draft.loop_category is None
        assert draft.tell_us_more == ""
        assert draft.bpm is None

    async def test_tags_keep_location_tags(self, controller):
        controller.add_location_from_autocomplete("Berlin", 52.52, 13.405)
        controller.set_tags_text("ambient, lofi")

        assert controller.tags == ["ambient", "lofi", "🌍 Berlin"]
        assert controller.tags_text == "ambient, lofi"

        controller.remove_location(0)

        assert controller.tags == ["ambient", "lofi"]
        assert controller.locations == []

    async def test_apply_preset_switches_content_type(self, controller):
        preset = SplitPreset(
            name="Band",
            composition=SplitGroup.solo(RightsCategory.COMPOSITION, COLLABORATOR),
            production=SplitGroup.solo(RightsCategory.PRODUCTION, COLLABORATOR),
            default_content_type=ContentType.FULL_SONG,
        )

        controller.apply_preset(preset)

        assert controller.content_type is ContentType.FULL_SONG
        assert controller.submission.loop_category is None
        assert controller.submission.composition.slots[0].wallet == COLLABORATOR


class TestLicensing:
    async def test_loops_cannot_be_protected(self, controller):
        controller.set_remix_protected(True)

        assert not controller.licensing.remix_protected

    async def test_protected_song_without_downloads(self, controller):
        controller.set_content_type(ContentType.FULL_SONG)
        controller.set_remix_protected(True)
        controller.set_downloads(False)

        summary = controller.review_summary()

        assert summary.license == "Protected"
        assert summary.price_line is None

    async def test_download_price_requires_downloads(self, controller):
        with pytest.raises(ValidationError, match="Enable downloads"):
            controller.set_download_price(3.0)

    async def test_enabling_downloads_uses_default_price(self, controller):
        controller.set_downloads(True)

        assert controller.licensing.download_price == 2.0
        assert controller.display_price == 2.0


class TestMedia:
    async def test_attach_audio_detects_bpm(self, controller, collaborators, make_file):
        collaborators.bpm_detector = AsyncMock()
        collaborators.bpm_detector.detect.return_value = BpmDetection(bpm=124, confidence=0.9)

        url = await controller.attach_audio(make_file("groove.wav", duration=8.0))

        assert url.startswith("https://media.test/audio/")
        assert controller.submission.audio_url == url
        assert controller.submission.bpm == 124
        assert controller.submission.duration_seconds == 8.0

    async def test_low_confidence_bpm_ignored(self, controller):
        controller.update(bpm=100)

        applied = controller.apply_bpm_detection(BpmDetection(bpm=90, confidence=0.2))

        assert not applied
        assert controller.submission.bpm == 100

    async def test_oversized_audio_rejected(self, controller, make_file):
        with pytest.raises(ValidationError, match="smaller than 50MB"):
            await controller.attach_audio(make_file("huge.wav", size_mb=60))

    async def test_attach_video_with_crop(self, controller, make_file):
        controller.set_content_type(ContentType.VIDEO_CLIP)
        crop = VideoCrop(x=0, y=40, width=720, height=720)

        url = await controller.attach_video(make_file("clip.mp4", size_mb=4, duration=5.0), crop)

        assert url.startswith("https://media.test/video/")
        assert controller.submission.video_crop == crop

        controller.set_video_crop(None)

        assert controller.submission.video_crop is None

    async def test_long_video_rejected(self, controller, make_file):
        controller.set_content_type(ContentType.VIDEO_CLIP)

        with pytest.raises(ValidationError, match="5 seconds or less"):
            await controller.attach_video(make_file("clip.mp4", duration=5.6))

    async def test_ep_price_follows_item_count(self, controller, make_file):
        controller.set_content_type(ContentType.EP)
        controller.set_download_price(2.0)
        files = [make_file(f"song_{n}.mp3") for n in range(3)]

        errors = await controller.attach_bundle_files(files)

        assert errors == {}
        assert controller.display_price == 6.0

        controller.remove_bundle_item(0)

        assert controller.display_price == 4.0

    async def test_failed_bundle_upload_can_be_retried(self, controller, storage, make_file):
        controller.set_content_type(ContentType.LOOP_PACK)
        storage.fail_names = {"b.wav"}

        errors = await controller.attach_bundle_files(
            [make_file("a.wav"), make_file("b.wav"), make_file("c.wav")]
        )

        assert errors == {"b.wav": "storage offline"}
        assert len(controller.bundle.pending_uploads()) == 1

        storage.fail_names.clear()

        assert await controller.upload_pending() == {}
        assert all(item.media_url for item in controller.bundle)
        assert controller.upload_errors == {}

    async def test_same_named_files_keep_separate_errors(self, controller, storage):
        controller.set_content_type(ContentType.LOOP_PACK)
        first = MediaFile("take.wav", 1024, path=Path("monday/take.wav"))
        second = MediaFile("take.wav", 1024, path=Path("tuesday/take.wav"))
        storage.fail_paths = {first.path, second.path}

        errors = await controller.attach_bundle_files([first, second])

        assert errors == {
            "take.wav (#1)": "storage offline",
            "take.wav (#2)": "storage offline",
        }

        storage.fail_paths = {second.path}

        assert await controller.upload_pending() == {"take.wav": "storage offline"}
        assert [item.source_file for _, item in controller.bundle.pending_uploads()] == [second]

    async def test_removed_item_drops_its_error(self, controller, storage, make_file):
        controller.set_content_type(ContentType.LOOP_PACK)
        storage.fail_names = {"b.wav"}
        await controller.attach_bundle_files([make_file("a.wav"), make_file("b.wav")])

        controller.remove_bundle_item(1)

        assert controller.upload_errors == {}

    async def test_suggest_locations(self, controller, collaborators):
        collaborators.autocomplete = AsyncMock()
        collaborators.autocomplete.suggest.return_value = [Location("Berlin", 52.52, 13.405)]

        assert await controller.suggest_locations("B") == []
        suggestions = await controller.suggest_locations("Ber")

        assert suggestions[0].name == "Berlin"
        collaborators.autocomplete.suggest.assert_awaited_once_with("Ber", 5)


class TestSubmit:
    async def _fill_loop(self, controller, make_file) -> None:
        controller.update(title="Dusty", artist="Kai")
        await controller.attach_audio(make_file("dusty.wav"))

    async def test_successful_submit_resets_draft(self, controller, repository, make_file):
        await self._fill_loop(controller, make_file)

        result = await controller.submit()

        assert result.record_id in repository.records
        assert repository.records[result.record_id]["title"] == "Dusty"
        assert controller.state is FlowState.COMPLETE
        assert controller.submission.title == ""
        assert controller.last_result is result

    async def test_validation_errors_are_collected(self, controller, repository):
        with pytest.raises(ValidationError) as exc_info:
            await controller.submit()

        assert "Track title is required" in exc_info.value.errors
        assert "Audio file is required" in exc_info.value.errors
        assert controller.errors == exc_info.value.errors
        assert controller.state is FlowState.BASIC_INFO
        assert repository.records == {}

    async def test_persistence_failure_keeps_draft(self, controller, repository, make_file):
        await self._fill_loop(controller, make_file)
        repository.fail_with = RuntimeError("disk full")

        with pytest.raises(PersistenceError):
            await controller.submit()

        assert controller.submission.title == "Dusty"
        assert not controller.is_submitting
        assert "disk full" in controller.errors[0]

    async def test_every_location_is_range_checked(self, controller, repository, make_file):
        await self._fill_loop(controller, make_file)
        controller.add_location_from_autocomplete("Berlin", 52.52, 13.405)
        controller.add_location_from_autocomplete("Nowhere", 95.0, 200.0)

        with pytest.raises(ValidationError) as exc_info:
            await controller.submit()

        assert exc_info.value.errors == [
            "Nowhere: Invalid latitude. Must be between -90 and 90 degrees.",
            "Nowhere: Invalid longitude. Must be between -180 and 180 degrees.",
        ]
        assert repository.records == {}

    async def test_submit_waits_for_running_bundle_uploads(
        self, controller, storage, uploads, repository, make_file
    ):
        controller.set_content_type(ContentType.EP)
        controller.update(title="Two Songs", artist="Kai")
        storage.gate = asyncio.Event()
        attach = asyncio.create_task(
            controller.attach_bundle_files([make_file("a.mp3"), make_file("b.mp3")])
        )
        await _settle(lambda: uploads.in_flight == 2)

        submit = asyncio.create_task(controller.submit())
        await _settle(lambda: uploads.in_flight > 2)

        assert uploads.in_flight == 2
        assert not submit.done()

        storage.gate.set()
        result = await submit
        await attach

        assert len(storage.keys) == 2
        stored = repository.items[result.record_id]
        assert all(row["media_url"] for row in stored)

    async def test_duplicate_submit_rejected(self, controller, repository, make_file):
        await self._fill_loop(controller, make_file)
        repository.gate = asyncio.Event()

        first = asyncio.create_task(controller.submit())
        await _settle(lambda: controller.is_submitting)

        with pytest.raises(SubmissionInProgressError):
            await controller.submit()

        repository.gate.set()
        await first
        assert len(repository.records) == 1

    async def test_edit_round_trip_for_ep(self, controller, collaborators, wallet, make_file):
        controller.set_content_type(ContentType.EP)
        controller.update(title="First EP", artist="Kai")
        await controller.attach_bundle_files([make_file(f"song_{n}.mp3") for n in range(3)])
        controller.bundle.move_down(0)
        result = await controller.submit()

        editor = await UploadFormController.for_edit(collaborators, wallet, result.record_id)

        assert editor.mode is UploadMode.ADVANCED
        assert editor.content_type is ContentType.EP
        assert editor.submission.title == "First EP"
        assert [item.title for item in editor.bundle] == ["song 1", "song 0", "song 2"]
        assert all(item.is_persisted for item in editor.bundle)
        assert editor.display_price == 3.0


class TestClose:
    async def test_close_warns_while_uploading(self, controller, storage, uploads, make_file):
        storage.gate = asyncio.Event()
        upload = asyncio.create_task(controller.attach_audio(make_file("slow.wav")))
        await _settle(lambda: uploads.is_uploading)

        outcome = controller.close()

        assert not outcome.closed
        assert outcome.warning == "1 upload(s) still in progress. Close anyway?"

        storage.gate.set()
        await upload
        assert controller.close().closed
        assert controller.state is FlowState.AUTHENTICATING

    async def test_forced_close_resets(self, controller):
        controller.update(title="Scratch")

        outcome = controller.close(force=True)

        assert outcome.closed
        assert controller.submission.title == ""
