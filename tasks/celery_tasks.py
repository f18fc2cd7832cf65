"""Celery background tasks."""
from typing import Any, Dict

from config import get_settings
from logging_config import get_logger
from metrics import summarize
from models.database import db_session
from models.domain import BillingStatus
from repositories import ContainerRepository, LedgerRepository, TariffRepository
from services import DemurrageBillingService
from tasks.celery_app import celery_app
from utils.date_helpers import today_in_timezone

logger = get_logger(__name__)
settings = get_settings()


def _service(db) -> DemurrageBillingService:
    return DemurrageBillingService(
        container_repository=ContainerRepository(db),
        tariff_repository=TariffRepository(db),
        ledger_repository=LedgerRepository(db),
    )


@celery_app.task(name="tasks.celery_tasks.evaluate_demurrage")
def evaluate_demurrage() -> Dict[str, Any]:
    """Recompute every billing item and log the summary."""
    today = today_in_timezone(settings.business_timezone)

    with db_session() as db:
        items = _service(db).evaluate(today)

    summary = summarize(items, today)
    logger.info(
        "Demurrage evaluation complete",
        total_items=summary.total_items,
        overdue=summary.overdue_items,
        at_risk=summary.at_risk_items,
        missing_tariffs=summary.missing_tariffs,
        total_sale=summary.total_sale,
    )

    result = summary.to_dict()
    result["as_of"] = today.isoformat()
    return result


@celery_app.task(name="tasks.celery_tasks.report_demurrage_exposure")
def report_demurrage_exposure() -> Dict[str, Any]:
    """Log every overdue or at-risk container for the operations team."""
    today = today_in_timezone(settings.business_timezone)

    with db_session() as db:
        items = _service(db).evaluate(today)

    flagged = [
        item for item in items
        if item.status in (BillingStatus.OVERDUE, BillingStatus.AT_RISK)
    ]

    for item in flagged:
        logger.info(
            f"{item.status.value}: {item.container_number} ({item.clock_type.value})",
            shipment_id=item.shipment_id,
            customer=item.customer,
            free_time_expiry=item.free_time_expiry.isoformat(),
            overdue_days=item.overdue_days,
            total_sale=item.total_sale,
            missing_tariff=item.missing_tariff,
        )

    return {
        "as_of": today.isoformat(),
        "overdue": sum(1 for item in flagged if item.status == BillingStatus.OVERDUE),
        "at_risk": sum(1 for item in flagged if item.status == BillingStatus.AT_RISK),
    }
