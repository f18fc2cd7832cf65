"""Billing item assembly and full evaluation passes."""
from dataclasses import replace
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from config import get_settings
from exceptions import BillingItemNotFoundError
from logging_config import get_logger
from models.domain import (
    BillingItem,
    BillingKey,
    BillingStatus,
    ClockType,
    ContainerSnapshot,
    Tariff,
)
from services.proration_engine import prorate
from services.status_classifier import classify_status
from services.tariff_matcher import match_tariffs
from services.timeline_resolver import count_overdue_days, resolve_timeline
from utils.date_helpers import today_in_timezone

logger = get_logger(__name__)
settings = get_settings()


def assemble_item(
    snapshot: ContainerSnapshot,
    today: date,
    cost_tariffs: Sequence[Tariff],
    sale_tariffs: Sequence[Tariff],
    invoiced_on: Optional[date] = None,
) -> Optional[BillingItem]:
    """
    Build the billing item for one container.

    An invoiced item is counted up to its invoicing date at most, so its
    figures stop moving even when a return or gate-in date is recorded
    afterwards. It keeps the INVOICED status.

    Args:
        snapshot: Container facts
        today: Evaluation date
        cost_tariffs: Cost registry contents
        sale_tariffs: Sale registry contents
        invoiced_on: Invoicing date when the key has a ledger entry

    Returns:
        BillingItem, or None when the clock has not started
    """
    timeline = resolve_timeline(snapshot)
    if timeline is None:
        return None

    overdue_days = count_overdue_days(timeline, today, cutoff=invoiced_on)

    if invoiced_on:
        status = BillingStatus.INVOICED
    else:
        status = classify_status(timeline.free_time_expiry, today, overdue_days)

    match = match_tariffs(snapshot.container_class, snapshot.carrier, cost_tariffs, sale_tariffs)

    item = BillingItem(
        shipment_id=snapshot.shipment_id,
        container_number=snapshot.container_number,
        clock_type=timeline.clock_type,
        container_class=snapshot.container_class,
        carrier=snapshot.carrier,
        customer=snapshot.customer,
        customer_id=snapshot.customer_id,
        free_days=snapshot.free_days,
        clock_start=timeline.clock_start,
        free_time_expiry=timeline.free_time_expiry,
        effective_end=timeline.effective_end,
        overdue_days=overdue_days,
        status=status,
        invoiced_on=invoiced_on,
    )

    if not match.is_complete:
        logger.warning(
            f"Missing tariff for container {snapshot.container_number}: {match.missing}",
            shipment_id=snapshot.shipment_id,
            container_class=snapshot.container_class.value,
        )
        return replace(item, missing_tariff=match.missing)

    result = prorate(overdue_days, match.cost, match.sale, timeline.free_time_expiry)

    return replace(
        item,
        chunks=result.chunks,
        total_cost=result.total_cost,
        total_sale=result.total_sale,
        total_profit=result.total_profit,
        unrated_days=result.unrated_days,
    )


def evaluate(
    snapshots: Iterable[ContainerSnapshot],
    cost_tariffs: Sequence[Tariff],
    sale_tariffs: Sequence[Tariff],
    today: date,
    invoiced: Optional[Mapping[BillingKey, date]] = None,
) -> List[BillingItem]:
    """
    Run one evaluation pass over a snapshot of containers.

    Pure: the same inputs always give the same list. Containers whose clock
    has not started are left out. Items are ordered by free-time expiry.
    """
    invoiced = invoiced or {}
    items: List[BillingItem] = []

    for snapshot in snapshots:
        key = (snapshot.shipment_id, snapshot.container_number, snapshot.clock_type)
        item = assemble_item(
            snapshot,
            today,
            cost_tariffs,
            sale_tariffs,
            invoiced_on=invoiced.get(key),
        )
        if item is not None:
            items.append(item)

    items.sort(key=lambda i: (i.free_time_expiry, i.shipment_id, i.container_number))
    return items


class DemurrageBillingService:
    """Evaluate billing items from injected repositories."""

    def __init__(
        self,
        container_repository,
        tariff_repository,
        ledger_repository=None,
        today_provider: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize service.

        Args:
            container_repository: Provides list_snapshots()
            tariff_repository: Provides list_cost_tariffs() and list_sale_tariffs()
            ledger_repository: Provides invoiced_keys(); optional
            today_provider: Clock override (defaults to the business timezone)
        """
        self.container_repository = container_repository
        self.tariff_repository = tariff_repository
        self.ledger_repository = ledger_repository
        self.today_provider = today_provider or (lambda: today_in_timezone(settings.business_timezone))

    def evaluate(self, today: Optional[date] = None) -> List[BillingItem]:
        """Recompute every billing item."""
        today = today or self.today_provider()

        snapshots = self.container_repository.list_snapshots()
        cost_tariffs = self.tariff_repository.list_cost_tariffs()
        sale_tariffs = self.tariff_repository.list_sale_tariffs()
        invoiced: Dict[BillingKey, date] = (
            self.ledger_repository.invoiced_keys() if self.ledger_repository else {}
        )

        items = evaluate(snapshots, cost_tariffs, sale_tariffs, today, invoiced)

        logger.info(
            f"Evaluated {len(items)} billing items from {len(snapshots)} containers",
            today=today.isoformat(),
            overdue=sum(1 for i in items if i.status == BillingStatus.OVERDUE),
            at_risk=sum(1 for i in items if i.status == BillingStatus.AT_RISK),
        )

        return items

    def get_item(
        self,
        shipment_id: str,
        container_number: str,
        clock_type: ClockType,
        today: Optional[date] = None,
    ) -> BillingItem:
        """
        Evaluate and return a single item.

        Raises:
            BillingItemNotFoundError: If no item exists for the key
        """
        for item in self.evaluate(today):
            if item.key == (shipment_id, container_number, clock_type):
                return item

        raise BillingItemNotFoundError(
            f"No {clock_type.value} item for container {container_number} on shipment {shipment_id}"
        )
