"""Tiered proration of overdue days across cost and sale schedules."""
from datetime import date
from typing import List, Optional, Sequence, Tuple

from constants import OPEN_ENDED_LABEL
from logging_config import get_logger
from models.domain import ProrationResult, Tariff, TariffTier, TierChunk
from utils.date_helpers import add_days

logger = get_logger(__name__)


def _tier_at(tiers: Sequence[TariffTier], index: int) -> Tuple[TariffTier, Optional[int]]:
    """
    Tier at index, clamped to the last one.

    The last tier's rate keeps applying past its nominal end, so its
    effective end is open.
    """
    if index >= len(tiers) - 1:
        return tiers[-1], None
    tier = tiers[index]
    return tier, tier.end


def _min_end(left: Optional[int], right: Optional[int]) -> Optional[int]:
    if left is None:
        return right
    if right is None:
        return left
    return min(left, right)


def _money(value: float) -> float:
    return round(value, 2)


def prorate(
    overdue_days: int,
    cost_tariff: Tariff,
    sale_tariff: Tariff,
    free_time_expiry: Optional[date] = None,
) -> ProrationResult:
    """
    Split overdue days into chunks bounded by both schedules' tiers.

    The two tier lists are walked in lockstep over a shared day cursor.
    Each step takes the intersection of the current cost and sale tiers,
    charges as many days as fit in it, then moves past whichever tier
    ended. A window that has already been passed is skipped without
    consuming days. Iteration is capped at the combined tier count; days
    left over after the cap, or falling in gaps between tiers, are
    reported as unrated rather than dropped.

    Args:
        overdue_days: Days past free-time expiry
        cost_tariff: Carrier schedule
        sale_tariff: Customer schedule
        free_time_expiry: Used only to put calendar dates on chunks

    Returns:
        ProrationResult with chunks in day order and totals
    """
    if overdue_days <= 0:
        return ProrationResult()

    cost_tiers = cost_tariff.tiers
    sale_tiers = sale_tariff.tiers

    if not cost_tiers or not sale_tiers:
        logger.warning(
            "Tariff without tiers, leaving all overdue days unrated",
            carrier=cost_tariff.carrier,
            container_class=sale_tariff.container_class.value,
            overdue_days=overdue_days,
        )
        return ProrationResult(unrated_days=overdue_days)

    remaining = overdue_days
    unrated = 0
    day = 1
    cost_index = 0
    sale_index = 0
    max_steps = len(cost_tiers) + len(sale_tiers)
    steps = 0
    chunks: List[TierChunk] = []

    while remaining > 0 and steps < max_steps:
        steps += 1

        cost_tier, cost_end = _tier_at(cost_tiers, cost_index)
        sale_tier, sale_end = _tier_at(sale_tiers, sale_index)

        start = max(cost_tier.start, sale_tier.start, day)
        end = _min_end(cost_end, sale_end)

        if start > day:
            # Gap between tiers: nothing rates these days
            skipped = min(start - day, remaining)
            unrated += skipped
            remaining -= skipped
            day = start
            if remaining == 0:
                break

        width = remaining if end is None else end - start + 1
        chunk_days = min(remaining, width)

        if chunk_days <= 0:
            # Degenerate window: the earlier-ending tier is already behind us
            if cost_end is not None and cost_end < start:
                cost_index += 1
            if sale_end is not None and sale_end < start:
                sale_index += 1
            continue

        cost = _money(chunk_days * cost_tier.rate)
        sale = _money(chunk_days * sale_tier.rate)

        chunks.append(
            TierChunk(
                period_label=f"Day {start} to {end if end is not None else OPEN_ENDED_LABEL}",
                start_day=start,
                end_day=end,
                days=chunk_days,
                cost_rate=cost_tier.rate,
                sale_rate=sale_tier.rate,
                cost=cost,
                sale=sale,
                profit=_money(sale - cost),
                first_date=add_days(free_time_expiry, start) if free_time_expiry else None,
                last_date=add_days(free_time_expiry, start + chunk_days - 1) if free_time_expiry else None,
            )
        )

        remaining -= chunk_days
        day = start + chunk_days

        if cost_end is not None and cost_end < day:
            cost_index += 1
        if sale_end is not None and sale_end < day:
            sale_index += 1

    if remaining > 0:
        logger.warning(
            "Tier walk stopped with days left over",
            carrier=cost_tariff.carrier,
            container_class=sale_tariff.container_class.value,
            unrated_days=remaining,
            steps=steps,
        )
        unrated += remaining

    total_cost = _money(sum(chunk.cost for chunk in chunks))
    total_sale = _money(sum(chunk.sale for chunk in chunks))

    return ProrationResult(
        chunks=tuple(chunks),
        total_cost=total_cost,
        total_sale=total_sale,
        total_profit=_money(total_sale - total_cost),
        unrated_days=unrated,
    )
