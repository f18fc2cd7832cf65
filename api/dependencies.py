"""Shared FastAPI dependencies."""
from datetime import date

from fastapi import Depends
from sqlalchemy.orm import Session

from config import get_settings
from models import get_db
from repositories import ContainerRepository, LedgerRepository, TariffRepository
from services import DemurrageBillingService, InvoiceTrigger
from utils.date_helpers import today_in_timezone


def get_today() -> date:
    """Evaluation date in the business timezone."""
    return today_in_timezone(get_settings().business_timezone)


def get_billing_service(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> DemurrageBillingService:
    return DemurrageBillingService(
        container_repository=ContainerRepository(db),
        tariff_repository=TariffRepository(db),
        ledger_repository=LedgerRepository(db),
        today_provider=lambda: today,
    )


def get_invoice_trigger(db: Session = Depends(get_db)) -> InvoiceTrigger:
    return InvoiceTrigger(LedgerRepository(db))
