"""Contributor split rules."""

from .splits import (
    TOTAL_TOLERANCE,
    SplitValidation,
    auto_balance,
    check_slots,
    fill_primary_contributor,
    validate,
)

__all__ = [
    "TOTAL_TOLERANCE",
    "SplitValidation",
    "auto_balance",
    "check_slots",
    "fill_primary_contributor",
    "validate",
]
