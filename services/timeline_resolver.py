"""Free-time clock resolution for a single container."""
from datetime import date
from typing import Optional

from models.domain import ClockType, ContainerSnapshot, Timeline
from utils.date_helpers import add_days, days_between


def resolve_timeline(snapshot: ContainerSnapshot, clock_type: Optional[ClockType] = None) -> Optional[Timeline]:
    """
    Resolve clock start, free-time expiry and effective end.

    Demurrage runs from vessel arrival to container return; detention runs
    from empty pickup to full gate-in. Free time includes the start day, so
    expiry is start + (free_days - 1).

    Args:
        snapshot: Container facts
        clock_type: Clock to resolve (defaults to the one implied by direction)

    Returns:
        Timeline, or None when the clock-start date is not known yet
    """
    clock_type = clock_type or snapshot.clock_type

    if clock_type == ClockType.DEMURRAGE:
        clock_start = snapshot.arrival_date
        effective_end = snapshot.return_date
    else:
        clock_start = snapshot.empty_pickup_date
        effective_end = snapshot.gate_in_date

    if clock_start is None:
        return None

    return Timeline(
        clock_type=clock_type,
        clock_start=clock_start,
        free_time_expiry=add_days(clock_start, max(snapshot.free_days, 1) - 1),
        effective_end=effective_end,
    )


def count_overdue_days(timeline: Timeline, today: date, cutoff: Optional[date] = None) -> int:
    """
    Days past free-time expiry, up to the effective end or today.

    A cutoff (the invoicing date) caps the count even when the effective
    end falls later.
    """
    reference = timeline.effective_end or today
    if cutoff is not None:
        reference = min(reference, cutoff)
    return max(0, days_between(timeline.free_time_expiry, reference))
