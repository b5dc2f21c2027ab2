"""Pure split validation and auto-balancing.

These functions never mutate their input. ``validate`` checks the total of a
single rights category, ``check_slots`` reports inconsistent slots and
``auto_balance`` redistributes 100% evenly across the active contributors of
a group.
"""

from attrs import define, field

from ipstudio.domain.entities import RightsCategory, SplitGroup

# Tolerance for floating point drift in hand-entered percentages
TOTAL_TOLERANCE = 0.01


@define(frozen=True, slots=True)
class SplitValidation:
    """Outcome of validating one split group."""

    ok: bool
    errors: list[str] = field(factory=list)


def _format_total(total: float) -> str:
    return f"{total:g}"


def validate(group: SplitGroup, category: RightsCategory | None = None) -> SplitValidation:
    """Check that a group's percentages total 100.

    Only the total is considered, slot layout never affects the outcome.
    Use ``check_slots`` for per-slot consistency.

    Args:
        group: Split group to check.
        category: Category used for error labels, defaults to the group's own.

    Returns:
        SplitValidation with ``ok`` false and the total error when it fails.
    """
    label = (category or group.category).display_name
    errors: list[str] = []

    total = group.total
    if round(abs(total - 100), 2) > TOTAL_TOLERANCE:
        errors.append(
            f"{label} split percentages must total 100% (currently {_format_total(total)}%)"
        )

    return SplitValidation(ok=not errors, errors=errors)


def check_slots(group: SplitGroup, category: RightsCategory | None = None) -> list[str]:
    """Consistency errors between each slot's wallet and percentage."""
    label = (category or group.category).display_name
    errors: list[str] = []
    for position, slot in enumerate(group.slots, start=1):
        if slot.percentage > 0 and not slot.is_active:
            errors.append(
                f"{label} Split {position}: Name or wallet address required when percentage is set"
            )
        elif position > 1 and slot.is_active and slot.percentage <= 0:
            errors.append(
                f"{label} Split {position}: Percentage required when collaborator is set"
            )
    return errors


def auto_balance(group: SplitGroup) -> SplitGroup:
    """Split 100% evenly across active slots.

    The first active slot absorbs the integer remainder, inactive slots get 0.
    With no active slots every percentage is 0.
    """
    active = group.active_indices
    if not active:
        return group.with_percentages([0] * len(group.slots))

    base = 100 // len(active)
    remainder = 100 - base * len(active)
    percentages = [0] * len(group.slots)
    for rank, index in enumerate(active):
        percentages[index] = base + remainder if rank == 0 else base
    return group.with_percentages(percentages)


def fill_primary_contributor(group: SplitGroup, identity: str | None) -> SplitGroup:
    """Attribute an unnamed first slot to the uploader.

    A first slot holding a percentage but no wallet is credited to
    ``identity``. Groups are returned unchanged when no identity is known.
    """
    first = group.slots[0]
    if identity and first.percentage > 0 and not first.is_active:
        return group.with_wallet(0, identity)
    return group
