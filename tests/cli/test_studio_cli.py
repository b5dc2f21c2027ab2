"""CLI tests: rule lookups, quotes and a full draft submission."""

import json
import re

import pytest
from typer.testing import CliRunner

from ipstudio.config import settings
from ipstudio.infrastructure.cli.app import app

WALLET = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"


@pytest.fixture
def runner():
    """CLI test runner."""
    return CliRunner()


@pytest.fixture
def studio_home(tmp_path, monkeypatch):
    """Point the database, media directory and log file at a temp dir."""
    monkeypatch.setattr(settings.database, "url", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setattr(settings.storage, "media_dir", tmp_path / "media")
    monkeypatch.setattr(settings.logging, "log_file", tmp_path / "ipstudio.log")
    return tmp_path


def _write_draft(directory, **overrides):
    (directory / "dusty_92bpm.wav").write_bytes(b"RIFF" + b"\0" * 64)
    draft = {
        "identity": WALLET,
        "content_type": "loop",
        "title": "Dusty Keys",
        "artist": "Kai",
        "tags": "keys, lofi",
        "locations": [{"name": "Berlin", "lat": 52.52, "lng": 13.405}],
        "files": ["dusty_92bpm.wav"],
    }
    draft.update(overrides)
    path = directory / "draft.json"
    path.write_text(json.dumps(draft), encoding="utf-8")
    return path


class TestRuleCommands:
    """Commands that only read policy tables."""

    def test_version(self, runner, studio_home):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "ipstudio" in result.stdout

    def test_policy_for_loop_pack(self, runner, studio_home):
        result = runner.invoke(app, ["policy", "loop_pack"])

        assert result.exit_code == 0
        assert "pack_title" in result.stdout
        assert "loop_files" in result.stdout

    def test_quote_for_ep(self, runner, studio_home):
        result = runner.invoke(
            app, ["quote", "ep", "--items", "3", "--downloads", "--price", "2"]
        )

        assert result.exit_code == 0
        assert "6.00" in result.stdout

    def test_steps_mark_skipped_release(self, runner, studio_home):
        result = runner.invoke(app, ["steps", "--content-type", "video_clip"])

        assert result.exit_code == 0
        assert "Connect to Release (Optional) (skipped)" in result.stdout


class TestSubmitCommand:
    """Drafts replayed through the authoring flow into a SQLite store."""

    def test_submit_then_show(self, runner, studio_home):
        draft = _write_draft(studio_home)

        result = runner.invoke(app, ["submit", str(draft)])

        assert result.exit_code == 0, result.stdout
        match = re.search(r"Stored ([0-9a-f-]{36})", result.stdout)
        assert match is not None
        assert list((studio_home / "media" / "audio").glob("*.wav"))

        shown = runner.invoke(app, ["show", match.group(1), "--identity", WALLET])

        assert shown.exit_code == 0, shown.stdout
        assert "Dusty Keys" in shown.stdout
        assert "Berlin" in shown.stdout

    def test_invalid_draft_exits_with_errors(self, runner, studio_home):
        draft = _write_draft(studio_home, title="")

        result = runner.invoke(app, ["submit", str(draft)])

        assert result.exit_code == 1
        assert "Track title is required" in result.stdout

    def test_show_unknown_record(self, runner, studio_home):
        result = runner.invoke(app, ["show", "missing", "--identity", WALLET])

        assert result.exit_code == 1
        assert "not found" in result.stdout
