"""JSON file store for saved split presets, one file per identity."""

import asyncio
from datetime import datetime
import hashlib
import json
from pathlib import Path
from typing import Any

from attrs import define, field

from ipstudio.config import get_logger, settings
from ipstudio.domain.entities import (
    ContentType,
    LoopCategory,
    RightsCategory,
    SplitGroup,
    SplitPreset,
)

logger = get_logger(__name__)


def preset_to_dict(preset: SplitPreset) -> dict[str, Any]:
    return {
        "id": preset.id,
        "name": preset.name,
        "description": preset.description,
        "composition": preset.composition.to_payload(),
        "production": preset.production.to_payload(),
        "default_content_type": preset.default_content_type,
        "default_loop_category": preset.default_loop_category,
        "created_at": preset.created_at.isoformat(),
    }


def preset_from_dict(data: dict[str, Any]) -> SplitPreset:
    content_type = data.get("default_content_type")
    loop_category = data.get("default_loop_category")
    return SplitPreset(
        id=data["id"],
        name=data["name"],
        description=data.get("description") or "",
        composition=SplitGroup.from_payload(RightsCategory.COMPOSITION, data["composition"]),
        production=SplitGroup.from_payload(RightsCategory.PRODUCTION, data["production"]),
        default_content_type=ContentType(content_type) if content_type else None,
        default_loop_category=LoopCategory(loop_category) if loop_category else None,
        created_at=datetime.fromisoformat(data["created_at"]),
    )


@define(slots=True)
class JsonSplitPresetStore:
    """Stores each identity's presets as a JSON list."""

    store_dir: Path = field(factory=lambda: settings.presets.store_dir, converter=Path)

    def _path(self, identity: str) -> Path:
        digest = hashlib.sha256(identity.encode()).hexdigest()[:16]
        return self.store_dir / f"{digest}.json"

    def _read(self, path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            return []
        return json.loads(path.read_text(encoding="utf-8"))

    def _write(self, path: Path, data: list[dict[str, Any]]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    async def load(self, identity: str) -> list[SplitPreset]:
        path = self._path(identity)
        try:
            raw = await asyncio.to_thread(self._read, path)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable preset file {path}: {e}")
            return []
        presets = [preset_from_dict(entry) for entry in raw]
        return sorted(presets, key=lambda p: p.created_at, reverse=True)

    async def save(self, identity: str, presets: list[SplitPreset]) -> None:
        await asyncio.to_thread(
            self._write, self._path(identity), [preset_to_dict(p) for p in presets]
        )
