"""Content type policy and pricing rules."""

from .content_types import (
    ContentTypeRules,
    allowed_licensing,
    check_coordinates,
    check_required_fields,
    normalize_licensing,
    required_fields,
    rules_for,
    validate_files,
)
from .pricing import (
    default_download_price,
    license_label,
    license_selection,
    license_type,
    price,
    price_fields,
    resolve_total,
)

__all__ = [
    # Content type policy
    "ContentTypeRules",
    "allowed_licensing",
    "check_coordinates",
    "check_required_fields",
    "normalize_licensing",
    "required_fields",
    "rules_for",
    "validate_files",
    # Pricing
    "default_download_price",
    "license_label",
    "license_selection",
    "license_type",
    "price",
    "price_fields",
    "resolve_total",
]
