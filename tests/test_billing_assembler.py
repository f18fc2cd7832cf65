"""Tests for billing item assembly and evaluation passes."""
from dataclasses import replace
from datetime import date

import pytest

from exceptions import BillingItemNotFoundError
from metrics import summarize
from models import BillingStatus, ClockType, ContainerClass, ContainerSnapshot, Direction
from services import DemurrageBillingService, assemble_item, evaluate
from tests.conftest import TODAY, make_tariff

COST_TARIFFS = [
    make_tariff([(1, 5, 50.0), (6, None, 80.0)], ContainerClass.DRY, carrier="Maersk"),
    make_tariff([(1, None, 120.0)], ContainerClass.SPECIAL, carrier="MSC"),
]

SALE_TARIFFS = [
    make_tariff([(1, 3, 70.0), (4, None, 100.0)], ContainerClass.DRY),
    make_tariff([(1, None, 200.0)], ContainerClass.SPECIAL),
]


@pytest.fixture
def overdue_import():
    return ContainerSnapshot(
        shipment_id="PROC-001",
        container_number="MSCU1234567",
        container_class=ContainerClass.DRY,
        free_days=7,
        direction=Direction.IMPORT,
        carrier="Maersk",
        customer="Acme Imports",
        customer_id=42,
        arrival_date=date(2024, 1, 1),
    )


@pytest.fixture
def untariffed_import():
    return ContainerSnapshot(
        shipment_id="PROC-002",
        container_number="HLXU1111111",
        container_class=ContainerClass.DRY,
        free_days=7,
        direction=Direction.IMPORT,
        carrier="Hapag-Lloyd",
        customer="Acme Imports",
        arrival_date=date(2024, 1, 8),
    )


@pytest.fixture
def returned_export():
    return ContainerSnapshot(
        shipment_id="PROC-003",
        container_number="TGHU7654321",
        container_class=ContainerClass.SPECIAL,
        free_days=5,
        direction=Direction.EXPORT,
        carrier="MSC",
        customer="Globex Exports",
        empty_pickup_date=date(2024, 1, 2),
        gate_in_date=date(2024, 1, 9),
    )


@pytest.fixture
def snapshots(overdue_import, untariffed_import, returned_export):
    return [overdue_import, untariffed_import, returned_export]


def test_assemble_overdue_item(overdue_import):
    item = assemble_item(overdue_import, TODAY, COST_TARIFFS, SALE_TARIFFS)

    assert item.key == ("PROC-001", "MSCU1234567", ClockType.DEMURRAGE)
    assert item.status == BillingStatus.OVERDUE
    assert item.overdue_days == 5
    assert item.free_time_expiry == date(2024, 1, 7)
    assert item.is_running
    assert [chunk.days for chunk in item.chunks] == [3, 2]
    assert (item.total_cost, item.total_sale, item.total_profit) == (250.0, 410.0, 160.0)
    assert item.missing_tariff is None
    assert item.customer_id == 42


def test_missing_tariff_item_has_no_breakdown(untariffed_import):
    item = assemble_item(untariffed_import, TODAY, COST_TARIFFS, SALE_TARIFFS)

    assert item.status == BillingStatus.AT_RISK
    assert item.missing_tariff == "Hapag-Lloyd"
    assert not item.has_breakdown
    assert item.chunks == ()
    assert item.total_sale == 0.0


def test_clock_not_started_is_excluded(overdue_import):
    pending = ContainerSnapshot(
        shipment_id="PROC-004",
        container_number="CAIU0000001",
        container_class=ContainerClass.DRY,
        free_days=7,
        direction=Direction.IMPORT,
        carrier="Maersk",
    )

    assert assemble_item(pending, TODAY, COST_TARIFFS, SALE_TARIFFS) is None

    items = evaluate([overdue_import, pending], COST_TARIFFS, SALE_TARIFFS, TODAY)
    assert [item.shipment_id for item in items] == ["PROC-001"]


def test_invoiced_item_is_frozen_at_invoicing_date(overdue_import):
    """Later passes keep the figures of the invoicing day."""
    item = assemble_item(
        overdue_import, TODAY, COST_TARIFFS, SALE_TARIFFS, invoiced_on=date(2024, 1, 10)
    )

    assert item.status == BillingStatus.INVOICED
    assert item.invoiced_on == date(2024, 1, 10)
    assert item.overdue_days == 3
    assert (item.total_cost, item.total_sale) == (150.0, 210.0)

    later = assemble_item(
        overdue_import, date(2024, 3, 1), COST_TARIFFS, SALE_TARIFFS, invoiced_on=date(2024, 1, 10)
    )
    assert later.overdue_days == 3
    assert later.total_sale == 210.0


def test_return_recorded_after_invoicing_does_not_move_figures(overdue_import):
    """Invoiced mid-period, then the return date arrives later."""
    returned = replace(overdue_import, return_date=date(2024, 1, 20))

    item = assemble_item(
        returned, date(2024, 2, 1), COST_TARIFFS, SALE_TARIFFS, invoiced_on=date(2024, 1, 10)
    )

    assert item.status == BillingStatus.INVOICED
    assert item.effective_end == date(2024, 1, 20)
    assert item.overdue_days == 3
    assert (item.total_cost, item.total_sale) == (150.0, 210.0)


def test_returned_container_near_expiry_is_at_risk(overdue_import):
    """Free time ending within three days flags the container even after return."""
    returned = replace(
        overdue_import, arrival_date=date(2024, 1, 9), return_date=date(2024, 1, 11)
    )

    item = assemble_item(returned, TODAY, COST_TARIFFS, SALE_TARIFFS)

    assert item.free_time_expiry == date(2024, 1, 15)
    assert item.overdue_days == 0
    assert item.status == BillingStatus.AT_RISK


def test_evaluate_orders_by_free_time_expiry(snapshots):
    items = evaluate(snapshots, COST_TARIFFS, SALE_TARIFFS, TODAY)

    assert [item.shipment_id for item in items] == ["PROC-003", "PROC-001", "PROC-002"]
    assert [item.clock_type for item in items] == [
        ClockType.DETENTION,
        ClockType.DEMURRAGE,
        ClockType.DEMURRAGE,
    ]


def test_evaluate_applies_invoiced_keys(snapshots):
    invoiced = {("PROC-003", "TGHU7654321", ClockType.DETENTION): date(2024, 1, 9)}

    items = evaluate(snapshots, COST_TARIFFS, SALE_TARIFFS, TODAY, invoiced)

    statuses = {item.shipment_id: item.status for item in items}
    assert statuses == {
        "PROC-001": BillingStatus.OVERDUE,
        "PROC-002": BillingStatus.AT_RISK,
        "PROC-003": BillingStatus.INVOICED,
    }


def test_evaluate_is_idempotent(snapshots):
    first = evaluate(snapshots, COST_TARIFFS, SALE_TARIFFS, TODAY)
    second = evaluate(snapshots, COST_TARIFFS, SALE_TARIFFS, TODAY)

    assert first == second


def test_every_overdue_day_is_rated(snapshots):
    for item in evaluate(snapshots, COST_TARIFFS, SALE_TARIFFS, TODAY):
        if item.has_breakdown:
            assert sum(chunk.days for chunk in item.chunks) == item.overdue_days
            assert item.total_profit == pytest.approx(item.total_sale - item.total_cost)


def test_summarize(snapshots):
    items = evaluate(snapshots, COST_TARIFFS, SALE_TARIFFS, TODAY)

    summary = summarize(items, TODAY)

    assert summary.total_items == 3
    assert summary.overdue_items == 2
    assert summary.at_risk_items == 1
    assert summary.ok_items == 0
    assert summary.demurrage_items == 2
    assert summary.detention_items == 1
    assert summary.total_overdue_days == 8
    assert summary.total_cost == 610.0
    assert summary.total_sale == 1010.0
    assert summary.total_profit == 400.0
    assert summary.missing_tariffs == ["Hapag-Lloyd"]


def test_summarize_leaves_out_invoiced_money(snapshots):
    invoiced = {("PROC-001", "MSCU1234567", ClockType.DEMURRAGE): date(2024, 1, 12)}
    items = evaluate(snapshots, COST_TARIFFS, SALE_TARIFFS, TODAY, invoiced)

    summary = summarize(items, TODAY)

    assert summary.invoiced_items == 1
    assert summary.total_sale == 600.0


class FakeContainerRepository:
    def __init__(self, snapshots):
        self.snapshots = snapshots

    def list_snapshots(self):
        return list(self.snapshots)


class FakeTariffRepository:
    def list_cost_tariffs(self):
        return COST_TARIFFS

    def list_sale_tariffs(self):
        return SALE_TARIFFS


class FakeLedgerRepository:
    def __init__(self, invoiced=None):
        self.invoiced = invoiced or {}

    def invoiced_keys(self):
        return dict(self.invoiced)


def test_service_evaluates_from_repositories(snapshots):
    service = DemurrageBillingService(
        container_repository=FakeContainerRepository(snapshots),
        tariff_repository=FakeTariffRepository(),
        ledger_repository=FakeLedgerRepository(),
        today_provider=lambda: TODAY,
    )

    items = service.evaluate()

    assert len(items) == 3
    assert service.evaluate() == items


def test_service_get_item(snapshots):
    service = DemurrageBillingService(
        FakeContainerRepository(snapshots),
        FakeTariffRepository(),
        today_provider=lambda: TODAY,
    )

    item = service.get_item("PROC-003", "TGHU7654321", ClockType.DETENTION)

    assert item.overdue_days == 3
    assert (item.total_cost, item.total_sale) == (360.0, 600.0)

    with pytest.raises(BillingItemNotFoundError):
        service.get_item("PROC-003", "TGHU7654321", ClockType.DEMURRAGE)
