"""Utility modules."""
from utils.validation import (
    normalize_container_number,
    validate_tariff_tiers,
    tiers_from_records,
    tiers_to_records,
)
from utils.date_helpers import (
    today_in_timezone,
    days_between,
    add_days,
    format_date_display,
)

__all__ = [
    "normalize_container_number",
    "validate_tariff_tiers",
    "tiers_from_records",
    "tiers_to_records",
    "today_in_timezone",
    "days_between",
    "add_days",
    "format_date_display",
]
