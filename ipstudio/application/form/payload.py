"""Mapping between drafts and the flat submission payload.

The payload is the logical record handed to persistence; the same shape is
read back when a persisted asset is opened for editing.
"""

from typing import Any

from ipstudio.config import settings
from ipstudio.domain.entities import (
    ContentType,
    LicensingSelection,
    Location,
    LocationSummary,
    LoopCategory,
    RightsCategory,
    SplitGroup,
    TrackSubmission,
    VideoCrop,
)
from ipstudio.domain.policy import (
    license_label,
    license_selection,
    license_type,
    price,
    price_fields,
    rules_for,
)

TITLE_FIELDS = ("title", "pack_title", "ep_title")


def _coordinate(value: float | None) -> float | None:
    # 0 means "no coordinate" in stored records
    return None if value in (None, 0) else value


def location_fields(summary: LocationSummary) -> dict[str, Any]:
    primary = summary.primary
    return {
        "location_lat": _coordinate(primary.lat) if primary else None,
        "location_lng": _coordinate(primary.lng) if primary else None,
        "primary_location": summary.raw_text or None,
        "locations": [loc.to_payload() for loc in summary.all] or None,
    }


def build_payload(
    submission: TrackSubmission,
    locations: LocationSummary,
    track_metadata: list[dict[str, Any]] | None = None,
    bundle_media_urls: list[str | None] | None = None,
) -> dict[str, Any]:
    """Assemble the persistence payload for a validated draft."""
    rules = rules_for(submission.content_type)
    selection = submission.licensing
    item_count = len(track_metadata or []) if rules.is_bundle else 1
    quote = price(submission.content_type, selection, item_count)
    open_to_contact = selection.open_to_commercial or selection.open_to_collaboration

    payload: dict[str, Any] = {
        "id": submission.id,
        "content_type": submission.content_type.value,
        rules.title_field: submission.title.strip(),
        "artist": submission.artist.strip(),
        "description": submission.description,
        "notes": submission.notes,
        "tags": list(submission.tags),
        "bpm": submission.bpm if rules.bpm_in_basic_info else None,
        "key": submission.key or None,
        "loop_category": (
            submission.loop_category.value
            if submission.content_type is ContentType.LOOP and submission.loop_category
            else None
        ),
        "tell_us_more": submission.tell_us_more or None,
        "uploader_wallet": submission.uploader_wallet or None,
        **submission.composition.to_payload(),
        **submission.production.to_payload(),
        "ai_assisted_idea": submission.ai_assisted_idea,
        "ai_assisted_implementation": submission.ai_assisted_implementation,
        "license_type": license_type(selection),
        "license_selection": license_selection(selection),
        "license_label": license_label(submission.content_type, selection),
        "allow_remixing": quote.remix_fee is not None,
        "allow_downloads": selection.allow_downloads,
        "allow_streaming": selection.allow_streaming if rules.streaming_option else None,
        "remix_protected": selection.remix_protected,
        **price_fields(quote),
        "open_to_commercial": selection.open_to_commercial,
        "commercial_contact": selection.commercial_contact or None,
        "open_to_collaboration": selection.open_to_collaboration,
        "collab_contact": selection.collab_contact or None,
        "contact_fee": settings.pricing.inquiry_fee if open_to_contact else None,
        **location_fields(locations),
        "cover_image_url": submission.cover_image_url or None,
        "duration": submission.duration_seconds,
    }

    if rules.is_bundle:
        payload[rules.media_field] = list(bundle_media_urls or [])
        payload["track_metadata"] = list(track_metadata or [])
    elif rules.media_kind == "video":
        payload["video_url"] = submission.video_url
        if submission.video_crop is not None:
            payload.update(submission.video_crop.to_payload())
    else:
        payload["audio_url"] = submission.audio_url

    return payload


def _title_from_record(record: dict[str, Any]) -> str:
    for key in TITLE_FIELDS:
        if record.get(key):
            return record[key]
    return ""


def _licensing_from_record(record: dict[str, Any]) -> LicensingSelection:
    allow_downloads = bool(record.get("allow_downloads"))
    unit_price = None
    if allow_downloads:
        unit_price = (
            record.get("download_price")
            or record.get("price_per_loop")
            or record.get("price_per_song")
        )
        if unit_price is None and record.get("content_type") not in ("loop_pack", "ep"):
            unit_price = record.get("price_stx")

    return LicensingSelection(
        remix_protected=bool(record.get("remix_protected")),
        allow_downloads=allow_downloads,
        download_price=unit_price,
        allow_streaming=record.get("allow_streaming") is not False,
        open_to_commercial=bool(record.get("open_to_commercial")),
        commercial_contact=record.get("commercial_contact") or "",
        open_to_collaboration=bool(record.get("open_to_collaboration")),
        collab_contact=record.get("collab_contact") or "",
    )


def locations_from_record(record: dict[str, Any]) -> list[Location]:
    """Stored locations. Stored coordinates are trusted and never re-geocoded."""
    stored = record.get("locations") or []
    if not stored and record.get("primary_location"):
        stored = [
            {
                "name": record["primary_location"],
                "lat": record.get("location_lat"),
                "lng": record.get("location_lng"),
            }
        ]

    locations = []
    for entry in stored:
        lat, lng = _coordinate(entry.get("lat")), _coordinate(entry.get("lng"))
        locations.append(
            Location(
                name=entry["name"],
                lat=lat,
                lng=lng,
                trusted=lat is not None and lng is not None,
            )
        )
    return locations


def submission_from_record(record: dict[str, Any]) -> TrackSubmission:
    """Hydrate a draft from a persisted record."""
    content_type = ContentType(record.get("content_type") or ContentType.LOOP)
    category = record.get("loop_category")

    return TrackSubmission(
        id=str(record["id"]),
        content_type=content_type,
        title=_title_from_record(record),
        artist=record.get("artist") or "",
        description=record.get("description") or "",
        notes=record.get("notes") or "",
        tags=list(record.get("tags") or []),
        loop_category=LoopCategory(category) if category else None,
        tell_us_more=record.get("tell_us_more") or "",
        bpm=record.get("bpm"),
        key=record.get("key") or "",
        uploader_wallet=record.get("uploader_wallet") or "",
        composition=SplitGroup.from_payload(RightsCategory.COMPOSITION, record),
        production=SplitGroup.from_payload(RightsCategory.PRODUCTION, record),
        ai_assisted_idea=bool(record.get("ai_assisted_idea")),
        ai_assisted_implementation=bool(record.get("ai_assisted_implementation")),
        licensing=_licensing_from_record(record),
        stored_price=record.get("price_stx"),
        locations=locations_from_record(record),
        audio_url=record.get("audio_url") or "",
        video_url=record.get("video_url") or "",
        cover_image_url=record.get("cover_image_url") or "",
        duration_seconds=record.get("duration"),
        video_crop=VideoCrop.from_payload(record),
        persisted=True,
    )
