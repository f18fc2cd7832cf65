"""Validation utilities for container and tariff data."""
import re
from typing import Any, Iterable, List, Mapping, Tuple

from exceptions import TariffValidationError, ValidationError
from constants import MAX_CONTAINER_NUMBER_LENGTH
from models.domain import TariffTier


def normalize_container_number(container_number: str) -> str:
    """
    Normalize a container number for lookups.

    Format is loosely ISO 6346 (4 letters + 7 digits); spaces and dashes
    are dropped and letters upper-cased. Check digits are not enforced
    because booking systems routinely carry provisional numbers.

    Args:
        container_number: Container number as entered

    Returns:
        Normalized container number

    Raises:
        ValidationError: If the number is empty or too long
    """
    if not container_number or not container_number.strip():
        raise ValidationError("Container number cannot be empty")

    normalized = re.sub(r"[\s\-]", "", container_number).upper()

    if len(normalized) > MAX_CONTAINER_NUMBER_LENGTH:
        raise ValidationError(
            f"Container number must be at most {MAX_CONTAINER_NUMBER_LENGTH} characters, "
            f"got {len(normalized)}: {container_number}"
        )

    return normalized


def validate_tariff_tiers(tiers: Iterable[TariffTier]) -> Tuple[TariffTier, ...]:
    """
    Check that tiers are contiguous from day 1 and well formed.

    Rules:
        - at least one tier
        - first tier starts at day 1
        - each tier starts the day after the previous one ends
        - a finite end is >= its start
        - only the last tier may be open-ended
        - rates are non-negative

    Args:
        tiers: Tiers in schedule order

    Returns:
        The tiers as a tuple

    Raises:
        TariffValidationError: On the first broken rule
    """
    tiers = tuple(tiers)

    if not tiers:
        raise TariffValidationError("Tariff must have at least one tier")

    expected_start = 1
    for index, tier in enumerate(tiers):
        position = index + 1
        is_last = index == len(tiers) - 1

        if tier.start != expected_start:
            raise TariffValidationError(
                f"Tier {position} must start at day {expected_start}, got {tier.start}"
            )

        if tier.rate < 0:
            raise TariffValidationError(f"Tier {position} rate must be non-negative")

        if tier.end is None:
            if not is_last:
                raise TariffValidationError(
                    f"Only the last tier may be open-ended (tier {position} of {len(tiers)})"
                )
            break

        if tier.end < tier.start:
            raise TariffValidationError(
                f"Tier {position} ends (day {tier.end}) before it starts (day {tier.start})"
            )

        expected_start = tier.end + 1

    return tiers


def tiers_from_records(records: Iterable[Mapping[str, Any]]) -> Tuple[TariffTier, ...]:
    """
    Build tiers from stored records.

    Accepts both {"start", "end"} and the registry's legacy {"from", "to"}
    keys. No contiguity check is made here.

    Raises:
        ValidationError: If a record lacks a start or a rate
    """
    tiers: List[TariffTier] = []
    for record in records:
        start = record.get("start", record.get("from"))
        end = record.get("end", record.get("to"))
        rate = record.get("rate")

        if start is None or rate is None:
            raise ValidationError(f"Tariff tier record is incomplete: {dict(record)}")

        tiers.append(
            TariffTier(
                start=int(start),
                end=int(end) if end is not None else None,
                rate=float(rate),
            )
        )

    return tuple(tiers)


def tiers_to_records(tiers: Iterable[TariffTier]) -> List[dict]:
    """Serialize tiers for JSON storage."""
    return [{"start": tier.start, "end": tier.end, "rate": tier.rate} for tier in tiers]
