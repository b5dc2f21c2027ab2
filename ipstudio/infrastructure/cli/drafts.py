"""JSON drafts for the ``submit`` command.

A draft mirrors what a creator fills in across the authoring steps::

    {
      "identity": "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7",
      "content_type": "loop_pack",
      "mode": "advanced",
      "title": "Dusty Keys", "artist": "Marlow", "tags": "lofi, keys",
      "composition": [{"wallet": "SP...", "percentage": 100}],
      "production": [{"wallet": "SP...", "percentage": 100}],
      "licensing": {"allow_downloads": true, "download_price": 2.5},
      "locations": ["Lagos, Nigeria"],
      "files": ["keys_92bpm.wav", {"path": "pad.wav", "title": "Pad"}]
    }

File paths are relative to the draft file.
"""

import json
import mimetypes
from pathlib import Path
from typing import Any

from ipstudio.application.form.controller import EDITABLE_FIELDS, UploadFormController
from ipstudio.domain.entities import (
    SLOTS_PER_GROUP,
    ContentType,
    MediaFile,
    RightsCategory,
    VideoCrop,
)


def load_draft(path: Path) -> dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        draft = json.load(f)
    if not isinstance(draft, dict):
        raise ValueError(f"Draft {path} must contain a JSON object")
    return draft


def media_file(entry: str | dict[str, Any], base_dir: Path) -> MediaFile:
    """MediaFile for a draft file entry, a bare path or an object with ``path``."""
    fields = {"path": entry} if isinstance(entry, str) else dict(entry)
    path = Path(fields["path"])
    if not path.is_absolute():
        path = base_dir / path
    mime_type, _ = mimetypes.guess_type(path.name)
    return MediaFile(
        name=path.name,
        size_bytes=path.stat().st_size,
        mime_type=mime_type or "",
        duration_seconds=fields.get("duration"),
        path=path,
    )


def _apply_splits(
    controller: UploadFormController, category: RightsCategory, slots: list[dict[str, Any]]
) -> None:
    padded = list(slots)[:SLOTS_PER_GROUP]
    padded += [{}] * (SLOTS_PER_GROUP - len(padded))
    for index, slot in enumerate(padded):
        controller.set_split_wallet(category, index, slot.get("wallet") or "")
    for index, slot in enumerate(padded):
        controller.set_split_percentage(category, index, float(slot.get("percentage") or 0))


def _apply_licensing(controller: UploadFormController, licensing: dict[str, Any]) -> None:
    if "remix_protected" in licensing:
        controller.set_remix_protected(bool(licensing["remix_protected"]))
    if "allow_downloads" in licensing:
        controller.set_downloads(
            bool(licensing["allow_downloads"]), licensing.get("download_price")
        )
    elif licensing.get("download_price") is not None:
        controller.set_download_price(float(licensing["download_price"]))
    if "allow_streaming" in licensing:
        controller.set_streaming(bool(licensing["allow_streaming"]))
    controller.set_contact(
        open_to_commercial=licensing.get("open_to_commercial"),
        commercial_contact=licensing.get("commercial_contact"),
        open_to_collaboration=licensing.get("open_to_collaboration"),
        collab_contact=licensing.get("collab_contact"),
    )


async def _attach_files(
    controller: UploadFormController, entries: list[Any], base_dir: Path
) -> None:
    files = [media_file(entry, base_dir) for entry in entries]
    content_type = controller.content_type

    if content_type.is_bundle:
        await controller.attach_bundle_files(files)
        for index, entry in enumerate(entries):
            if isinstance(entry, dict) and entry.get("title"):
                controller.bundle.edit_title(index, entry["title"])
            if isinstance(entry, dict) and entry.get("bpm") is not None:
                controller.bundle.edit_bpm(index, entry["bpm"])
    elif content_type is ContentType.VIDEO_CLIP:
        crop = entries[0].get("crop") if isinstance(entries[0], dict) else None
        await controller.attach_video(files[0], VideoCrop(**crop) if crop else None)
    else:
        await controller.attach_audio(files[0])


async def apply_draft(
    controller: UploadFormController, draft: dict[str, Any], base_dir: Path
) -> None:
    """Replay a draft through the controller the way the steps would fill it."""
    if draft.get("content_type"):
        controller.set_content_type(draft["content_type"])
    if draft.get("mode"):
        controller.set_mode(draft["mode"])

    fields = {key: draft[key] for key in EDITABLE_FIELDS if key in draft}
    if fields:
        controller.update(**fields)
    if "tags" in draft:
        tags = draft["tags"]
        controller.set_tags_text(tags if isinstance(tags, str) else ", ".join(tags))

    for category in RightsCategory:
        if category.value in draft:
            _apply_splits(controller, category, draft[category.value])

    if draft.get("licensing"):
        _apply_licensing(controller, draft["licensing"])

    for location in draft.get("locations") or []:
        match location:
            case {"name": name, "lat": lat, "lng": lng}:
                controller.add_location_from_autocomplete(name, lat, lng)
            case str() as text:
                controller.add_location_text(text)

    if draft.get("files"):
        await _attach_files(controller, draft["files"], base_dir)

    # An explicit BPM wins over one detected from the file name
    if draft.get("bpm") is not None:
        controller.update(bpm=draft["bpm"])
