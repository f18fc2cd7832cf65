"""Repository for ledger entries."""
from datetime import date
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import get_settings
from exceptions import LedgerError
from models import BillingKey, ClockType, LedgerEntry
from repositories.base import BaseRepository
from logging_config import get_logger
from utils.date_helpers import today_in_timezone

logger = get_logger(__name__)
settings = get_settings()


class LedgerRepository(BaseRepository[LedgerEntry]):
    """Financial ledger for container charges."""

    def __init__(self, db: Session):
        """
        Initialize ledger repository.

        Args:
            db: Database session
        """
        super().__init__(LedgerEntry, db)

    def invoiced_keys(self) -> Dict[BillingKey, date]:
        """Map every invoiced billing key to its invoicing date."""
        rows = self.db.query(
            LedgerEntry.shipment_reference,
            LedgerEntry.container_number,
            LedgerEntry.clock_type,
            LedgerEntry.invoiced_on,
        ).all()
        return {
            (shipment, container, ClockType(clock_type)): invoiced_on
            for shipment, container, clock_type, invoiced_on in rows
        }

    def get_by_key(self, key: BillingKey) -> Optional[LedgerEntry]:
        shipment_reference, container_number, clock_type = key
        return (
            self.db.query(LedgerEntry)
            .filter(
                LedgerEntry.shipment_reference == shipment_reference,
                LedgerEntry.container_number == container_number,
                LedgerEntry.clock_type == clock_type.value,
            )
            .first()
        )

    def create_entry(
        self,
        customer_id: Optional[int],
        shipment_id: str,
        container_number: str,
        clock_type: ClockType,
        total_sale: float,
        currency: str,
        due_date: date,
        reference: str,
        partner: Optional[str] = None,
        invoiced_on: Optional[date] = None,
    ) -> int:
        """
        Create the receivable for a container charge.

        Single attempt, no retry.

        Returns:
            Ledger entry ID

        Raises:
            LedgerError: If the entry cannot be written
        """
        entry = LedgerEntry(
            shipment_reference=shipment_id,
            container_number=container_number,
            clock_type=clock_type.value,
            reference=reference,
            customer_id=customer_id,
            partner=partner,
            amount=total_sale,
            currency=currency,
            due_date=due_date,
            invoiced_on=invoiced_on or today_in_timezone(settings.business_timezone),
        )

        try:
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating ledger entry {reference}: {e}")
            raise LedgerError(f"Failed to create ledger entry {reference}") from e

        logger.info(
            f"Created ledger entry {reference}",
            ledger_entry_id=entry.id,
            amount=total_sale,
            currency=currency,
        )
        return entry.id
