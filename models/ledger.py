"""Financial ledger entries created by the invoicing trigger."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, UniqueConstraint

from models.database import Base
from config import get_settings
from constants import LEDGER_ENTRY_CREDIT, LEDGER_STATUS_OPEN
from utils.date_helpers import today_in_timezone


def _business_today():
    return today_in_timezone(get_settings().business_timezone)


class LedgerEntry(Base):
    """
    Receivable raised for one container charge.

    Its existence marks the (shipment, container, clock type) key as
    invoiced; invoiced_on freezes the charge as of that day.
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        UniqueConstraint(
            "shipment_reference", "container_number", "clock_type",
            name="uq_ledger_billing_key",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Billing key
    shipment_reference = Column(String(50), nullable=False, index=True)
    container_number = Column(String(20), nullable=False)
    clock_type = Column(String(20), nullable=False)

    # Entry
    reference = Column(String(50), nullable=False, index=True)
    customer_id = Column(Integer)
    partner = Column(String(255))
    entry_type = Column(String(20), nullable=False, default=LEDGER_ENTRY_CREDIT)
    status = Column(String(20), nullable=False, default=LEDGER_STATUS_OPEN)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False)
    due_date = Column(Date, nullable=False)
    invoiced_on = Column(Date, nullable=False, default=_business_today)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<LedgerEntry(reference='{self.reference}', amount={self.amount} {self.currency})>"
