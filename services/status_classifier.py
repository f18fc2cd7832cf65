"""Billing status classification."""
from datetime import date
from typing import Optional

from config import get_settings
from models.domain import BillingStatus
from utils.date_helpers import days_between

settings = get_settings()


def classify_status(
    free_time_expiry: date,
    today: date,
    overdue_days: int,
    threshold_days: Optional[int] = None,
) -> BillingStatus:
    """
    Classify a resolved timeline.

    Overdue days always win. Otherwise a container whose free time expires
    within the threshold (3 days by default) is at risk, whether or not its
    clock has stopped. INVOICED is never returned here; it is applied by the
    assembler from ledger state.
    """
    if overdue_days > 0:
        return BillingStatus.OVERDUE

    threshold = settings.at_risk_threshold_days if threshold_days is None else threshold_days
    if days_between(today, free_time_expiry) <= threshold:
        return BillingStatus.AT_RISK

    return BillingStatus.OK
