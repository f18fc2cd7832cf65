"""Normalization of free-form container and shipment facts."""
import re
from typing import Optional

from config import get_settings
from constants import REEFER_MARKERS, SPECIAL_MARKERS
from models.domain import ContainerClass, Direction

settings = get_settings()


def normalize_container_class(container_type: Optional[str]) -> ContainerClass:
    """
    Map a booking container type to its tariff class.

    "40'RF" and "40 REEFER" are reefer, "20'OT" and "40'FR" are special,
    everything else (including blanks) is dry.
    """
    if not container_type:
        return ContainerClass.DRY

    upper = container_type.upper()

    if any(marker in upper for marker in REEFER_MARKERS):
        return ContainerClass.REEFER

    if any(marker in upper for marker in SPECIAL_MARKERS):
        return ContainerClass.SPECIAL

    return ContainerClass.DRY


def parse_free_days(*values: Optional[str], default: Optional[int] = None) -> int:
    """
    Parse free time from free-text fields.

    The first value holding a digit run wins, so a container-level value
    overrides the shipment-level one when passed first. Unparseable input
    falls back to the configured default (7 days).

    Args:
        *values: Candidate texts such as "14 days" or "7"
        default: Override for the configured default

    Returns:
        Free days (at least 1)
    """
    fallback = default if default is not None else settings.default_free_days

    for value in values:
        if value is None:
            continue
        match = re.search(r"\d+", str(value))
        if match:
            days = int(match.group())
            if days > 0:
                return days

    return fallback


def resolve_direction(destination: Optional[str], domestic_country_code: Optional[str] = None) -> Direction:
    """
    Derive shipment direction from its destination.

    A destination such as "Santos, BR" carrying the domestic country code
    as a separate token is an import; anything else is an export.
    """
    code = (domestic_country_code or settings.domestic_country_code).upper()
    tokens = re.split(r"[^A-Z0-9]+", (destination or "").upper())

    if code in tokens:
        return Direction.IMPORT
    return Direction.EXPORT
