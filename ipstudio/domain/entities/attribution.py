"""Attribution entities: contributor splits and saved split presets.

Pure value objects with zero external dependencies.
"""

from datetime import UTC, datetime

import attrs
from attrs import define, field, validators

from .content import ContentType, LoopCategory, RightsCategory

SLOTS_PER_GROUP = 3


@define(frozen=True, slots=True)
class SplitSlot:
    """One contributor slot: a wallet (or collaborator name) and its share."""

    wallet: str = field(default="", converter=lambda v: v or "")
    percentage: float = 0

    @property
    def is_active(self) -> bool:
        """A slot with a non-blank wallet counts as an active contributor."""
        return bool(self.wallet.strip())


def _three_slots(instance, attribute, value) -> None:
    if len(value) != SLOTS_PER_GROUP:
        raise ValueError(
            f"{attribute.name} must contain exactly {SLOTS_PER_GROUP} slots, got {len(value)}"
        )


@define(frozen=True, slots=True)
class SplitGroup:
    """Exactly three contributor slots for one rights category.

    Unused slots carry an empty wallet and a 0 percentage.
    """

    category: RightsCategory = field(converter=RightsCategory)
    slots: tuple[SplitSlot, ...] = field(
        factory=lambda: tuple(SplitSlot() for _ in range(SLOTS_PER_GROUP)),
        converter=tuple,
        validator=[
            _three_slots,
            validators.deep_iterable(member_validator=validators.instance_of(SplitSlot)),
        ],
    )

    @classmethod
    def empty(cls, category: RightsCategory) -> "SplitGroup":
        """Group with all three slots unused."""
        return cls(category=category)

    @classmethod
    def solo(cls, category: RightsCategory, wallet: str) -> "SplitGroup":
        """Group attributing 100% to a single contributor."""
        return cls(
            category=category,
            slots=(SplitSlot(wallet, 100), SplitSlot(), SplitSlot()),
        )

    @property
    def total(self) -> float:
        """Sum of the three percentages, rounded to 2 decimal places."""
        return round(sum(slot.percentage for slot in self.slots), 2)

    @property
    def active_indices(self) -> list[int]:
        return [i for i, slot in enumerate(self.slots) if slot.is_active]

    @property
    def active_count(self) -> int:
        return len(self.active_indices)

    def with_slot(self, index: int, slot: SplitSlot) -> "SplitGroup":
        """Create a new group with the slot at ``index`` replaced."""
        if not 0 <= index < SLOTS_PER_GROUP:
            raise IndexError(f"Split slot index out of range: {index}")
        slots = list(self.slots)
        slots[index] = slot
        return attrs.evolve(self, slots=tuple(slots))

    def with_wallet(self, index: int, wallet: str) -> "SplitGroup":
        return self.with_slot(index, attrs.evolve(self.slots[index], wallet=wallet))

    def with_percentage(self, index: int, percentage: float) -> "SplitGroup":
        return self.with_slot(
            index, attrs.evolve(self.slots[index], percentage=percentage)
        )

    def with_percentages(self, percentages: list[float]) -> "SplitGroup":
        """Create a new group with every slot's percentage replaced, wallets kept."""
        return attrs.evolve(
            self,
            slots=tuple(
                attrs.evolve(slot, percentage=pct)
                for slot, pct in zip(self.slots, percentages, strict=True)
            ),
        )

    def to_payload(self) -> dict[str, str | float | None]:
        """Flatten into ``<category>_split_<n>_{wallet,percentage}`` fields."""
        payload: dict[str, str | float | None] = {}
        for position, slot in enumerate(self.slots, start=1):
            prefix = f"{self.category.value}_split_{position}"
            payload[f"{prefix}_wallet"] = slot.wallet or None
            payload[f"{prefix}_percentage"] = slot.percentage
        return payload

    @classmethod
    def from_payload(
        cls, category: RightsCategory, record: dict
    ) -> "SplitGroup":
        """Rebuild a group from flattened record fields."""
        slots = []
        for position in range(1, SLOTS_PER_GROUP + 1):
            prefix = f"{category.value}_split_{position}"
            slots.append(
                SplitSlot(
                    wallet=record.get(f"{prefix}_wallet") or "",
                    percentage=record.get(f"{prefix}_percentage") or 0,
                )
            )
        return cls(category=category, slots=tuple(slots))


@define(frozen=True, slots=True)
class SplitPreset:
    """Named, reusable pair of split groups saved by a creator."""

    name: str
    composition: SplitGroup
    production: SplitGroup
    id: str = ""
    description: str = ""
    default_content_type: ContentType | None = None
    default_loop_category: LoopCategory | None = None
    created_at: datetime = field(factory=lambda: datetime.now(UTC))
