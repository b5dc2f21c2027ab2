"""Authoring flow building blocks: step tables, quick-mode defaults and payload mapping.

The flow controller lives in ``ipstudio.application.form.controller`` and is
imported from there directly.
"""

from .defaults import apply_defaults, default_licensing
from .payload import (
    build_payload,
    location_fields,
    locations_from_record,
    submission_from_record,
)
from .steps import (
    ADVANCED_STEPS,
    QUICK_STEPS,
    STEP_TITLES,
    FlowState,
    sections_for,
    skipped_steps,
    step_requirements,
    step_titles,
    steps_for,
)

__all__ = [
    # Steps
    "ADVANCED_STEPS",
    "QUICK_STEPS",
    "STEP_TITLES",
    "FlowState",
    "sections_for",
    "skipped_steps",
    "step_requirements",
    "step_titles",
    "steps_for",
    # Defaults
    "apply_defaults",
    "default_licensing",
    # Payload mapping
    "build_payload",
    "location_fields",
    "locations_from_record",
    "submission_from_record",
]
