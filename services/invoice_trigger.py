"""Invoicing of computed container charges."""
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from config import get_settings
from exceptions import InvoicingPreconditionError
from logging_config import get_logger
from models.domain import BillingItem, BillingStatus
from templates.email_templates import get_email_template
from utils.date_helpers import add_days, format_date_display, today_in_timezone

logger = get_logger(__name__)
settings = get_settings()


@dataclass(frozen=True)
class InvoiceResult:
    ledger_entry_id: int
    invoice_reference: str
    amount: float
    currency: str
    due_date: date
    email: Dict[str, str]


def invoicing_blockers(item: BillingItem, allow_mid_period: bool = False) -> List[str]:
    """
    Reasons an item cannot be invoiced; empty when it can.

    Args:
        item: Evaluated billing item
        allow_mid_period: Bill a clock that is still running
    """
    blockers = []

    if item.status == BillingStatus.INVOICED:
        blockers.append(f"{item.clock_type.value} for {item.container_number} is already invoiced")

    if item.missing_tariff:
        blockers.append(f"missing tariff: {item.missing_tariff}")
    elif item.total_sale <= 0:
        blockers.append("nothing to charge: sale total is zero")

    if item.unrated_days:
        blockers.append(f"{item.unrated_days} overdue days have no rate")

    if item.effective_end is None and not allow_mid_period:
        blockers.append("clock is still running; mid-period billing was not allowed")

    return blockers


class InvoiceTrigger:
    """Raise the receivable and invoice email for a billing item."""

    def __init__(self, ledger_repository):
        """
        Initialize trigger.

        Args:
            ledger_repository: Provides get_by_key(key) and create_entry(...)
        """
        self.ledger_repository = ledger_repository

    def invoice(
        self,
        item: BillingItem,
        customer_id: Optional[int] = None,
        currency: Optional[str] = None,
        due_date: Optional[date] = None,
        allow_mid_period: bool = False,
        invoiced_on: Optional[date] = None,
        exchange_rate: Optional[str] = None,
    ) -> InvoiceResult:
        """
        Invoice one billing item.

        The ledger call is made once; its failure propagates as LedgerError
        and the item is left as it was.

        Args:
            item: Evaluated billing item
            customer_id: Ledger customer (defaults to the item's)
            currency: Invoice currency (defaults to configured)
            due_date: Payment due date (defaults to invoicing date + configured days)
            allow_mid_period: Bill a clock that is still running
            invoiced_on: Invoicing date (defaults to today)
            exchange_rate: Reference BRL rate quoted in the email

        Returns:
            InvoiceResult

        Raises:
            InvoicingPreconditionError: If the item cannot be invoiced
        """
        blockers = invoicing_blockers(item, allow_mid_period)
        if blockers:
            logger.warning(
                f"Refusing to invoice container {item.container_number}",
                shipment_id=item.shipment_id,
                clock_type=item.clock_type.value,
                blockers=blockers,
            )
            raise InvoicingPreconditionError("; ".join(blockers))

        if self.ledger_repository.get_by_key(item.key) is not None:
            logger.warning(
                f"Ledger already holds {item.clock_type.value} for container {item.container_number}",
                shipment_id=item.shipment_id,
            )
            raise InvoicingPreconditionError(
                f"{item.clock_type.value} for {item.container_number} is already invoiced"
            )

        invoiced_on = invoiced_on or today_in_timezone(settings.business_timezone)
        currency = currency or settings.invoice_currency
        due_date = due_date or add_days(invoiced_on, settings.invoice_due_days)
        reference = f"{settings.invoice_reference_prefix}-{item.container_number}"

        ledger_entry_id = self.ledger_repository.create_entry(
            customer_id=customer_id if customer_id is not None else item.customer_id,
            shipment_id=item.shipment_id,
            container_number=item.container_number,
            clock_type=item.clock_type,
            total_sale=item.total_sale,
            currency=currency,
            due_date=due_date,
            reference=reference,
            partner=item.customer,
            invoiced_on=invoiced_on,
        )

        email = get_email_template(
            "container_charge_invoice",
            {
                "customer_name": item.customer,
                "clock_type": item.clock_type.value,
                "invoice_reference": reference,
                "shipment_id": item.shipment_id,
                "container_number": item.container_number,
                "overdue_days": item.overdue_days,
                "total_amount": item.total_sale,
                "currency": currency,
                "due_date": format_date_display(due_date),
                "exchange_rate": exchange_rate,
                "chunks": [
                    {
                        "period_label": chunk.period_label,
                        "days": chunk.days,
                        "sale_rate": chunk.sale_rate,
                        "sale": chunk.sale,
                    }
                    for chunk in item.chunks
                ],
            },
        ).render()

        logger.info(
            f"Invoiced {item.clock_type.value} for container {item.container_number}: "
            f"{currency} {item.total_sale:.2f}",
            ledger_entry_id=ledger_entry_id,
            shipment_id=item.shipment_id,
        )

        return InvoiceResult(
            ledger_entry_id=ledger_entry_id,
            invoice_reference=reference,
            amount=item.total_sale,
            currency=currency,
            due_date=due_date,
            email=email,
        )
