"""Tests for bundle item ordering."""

import pytest

from ipstudio.domain.bundles import BatchTrackOrdering


@pytest.fixture
def files(make_file):
    return [make_file("intro_beat.wav"), make_file("main_loop.wav"), make_file("outro.wav")]


class TestBatchTrackOrdering:
    def test_titles_default_to_file_names(self, files):
        ordering = BatchTrackOrdering.from_files(files)

        assert [item.title for item in ordering] == ["intro beat", "main loop", "outro"]

    def test_positions_are_one_indexed(self, files):
        metadata = BatchTrackOrdering.from_files(files).to_submission_metadata()

        assert [entry["position"] for entry in metadata] == [1, 2, 3]
        assert all(entry["id"] is None for entry in metadata)

    def test_move_up_then_down_restores_order(self, files):
        ordering = BatchTrackOrdering.from_files(files)
        before = [item.title for item in ordering]

        ordering.move_up(2)
        assert [item.title for item in ordering] == ["intro beat", "outro", "main loop"]
        ordering.move_down(1)

        assert [item.title for item in ordering] == before

    def test_moves_at_the_ends_are_noops(self, files):
        ordering = BatchTrackOrdering.from_files(files)

        ordering.move_up(0)
        ordering.move_down(2)

        assert [item.title for item in ordering] == ["intro beat", "main loop", "outro"]

    def test_positions_follow_current_order(self, files):
        ordering = BatchTrackOrdering.from_files(files)
        ordering.move_down(0)

        metadata = ordering.to_submission_metadata()

        assert [(e["title"], e["position"]) for e in metadata] == [
            ("main loop", 1),
            ("intro beat", 2),
            ("outro", 3),
        ]

    def test_edit_title_and_bpm(self, files):
        ordering = BatchTrackOrdering.from_files(files)

        ordering.edit_title(1, "Main")
        ordering.edit_bpm(1, 92.4)

        assert ordering.items[1].title == "Main"
        assert ordering.items[1].bpm == 92

    def test_upload_results_follow_moved_items(self, files):
        ordering = BatchTrackOrdering.from_files(files)
        ordering.move_up(2)

        assert ordering.mark_uploaded(files[2], "https://media.test/outro.wav")

        assert ordering.media_urls() == [None, "https://media.test/outro.wav", None]
        assert [i for i, _ in ordering.pending_uploads()] == [0, 2]

    def test_index_of_tracks_file_handles(self, files):
        ordering = BatchTrackOrdering.from_files(files)
        ordering.move_down(0)

        assert ordering.index_of(files[0]) == 1

        ordering.remove(1)

        assert ordering.index_of(files[0]) is None

    def test_persisted_items_are_not_pending(self):
        ordering = BatchTrackOrdering.from_persisted(
            [
                {"id": "b", "title": "Second", "bpm": 90, "position": 2, "media_url": "u2"},
                {"id": "a", "title": "First", "bpm": None, "position": 1, "media_url": "u1"},
            ]
        )

        assert [item.stable_id for item in ordering] == ["a", "b"]
        assert ordering.pending_uploads() == []
        assert ordering.to_submission_metadata()[0]["id"] == "a"

    def test_remove_and_clear(self, files):
        ordering = BatchTrackOrdering.from_files(files)

        removed = ordering.remove(0)
        assert removed.title == "intro beat"
        assert len(ordering) == 2

        ordering.clear()
        assert len(ordering) == 0
