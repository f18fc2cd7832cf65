"""Reporting summaries over evaluated billing items."""
from collections import Counter
from dataclasses import dataclass, asdict, field
from datetime import date
from typing import Any, Dict, Iterable, List

from models.domain import BillingItem, BillingStatus, ClockType
from logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class DemurrageMetrics:
    """Portfolio view of one evaluation pass."""

    as_of: date
    total_items: int
    overdue_items: int
    at_risk_items: int
    ok_items: int
    invoiced_items: int
    demurrage_items: int
    detention_items: int
    missing_tariff_items: int
    total_overdue_days: int
    total_cost: float
    total_sale: float
    total_profit: float
    missing_tariffs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


def summarize(items: Iterable[BillingItem], as_of: date) -> DemurrageMetrics:
    """
    Summarize billing items.

    Money totals cover items with a breakdown that are not yet invoiced;
    missing_tariffs lists each absent tariff once.
    """
    items = list(items)
    statuses = Counter(item.status for item in items)
    clocks = Counter(item.clock_type for item in items)

    billable = [
        item for item in items
        if item.has_breakdown and item.status != BillingStatus.INVOICED
    ]
    missing = sorted({item.missing_tariff for item in items if item.missing_tariff})

    total_cost = round(sum(item.total_cost for item in billable), 2)
    total_sale = round(sum(item.total_sale for item in billable), 2)

    metrics = DemurrageMetrics(
        as_of=as_of,
        total_items=len(items),
        overdue_items=statuses[BillingStatus.OVERDUE],
        at_risk_items=statuses[BillingStatus.AT_RISK],
        ok_items=statuses[BillingStatus.OK],
        invoiced_items=statuses[BillingStatus.INVOICED],
        demurrage_items=clocks[ClockType.DEMURRAGE],
        detention_items=clocks[ClockType.DETENTION],
        missing_tariff_items=sum(1 for item in items if item.missing_tariff),
        total_overdue_days=sum(item.overdue_days for item in billable),
        total_cost=total_cost,
        total_sale=total_sale,
        total_profit=round(total_sale - total_cost, 2),
        missing_tariffs=missing,
    )

    if missing:
        logger.warning(f"{metrics.missing_tariff_items} items blocked by missing tariffs", missing=missing)

    return metrics
