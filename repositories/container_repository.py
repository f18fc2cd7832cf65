"""Repository for shipment containers."""
from datetime import date
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from config import get_settings
from exceptions import ContainerNotFoundError, DatabaseError, ValidationError
from models import Container, ContainerSnapshot, Milestone, Shipment
from repositories.base import BaseRepository
from constants import (
    ARRIVAL_MILESTONE_KEYWORDS,
    EMPTY_PICKUP_MILESTONE_KEYWORDS,
    GATE_IN_MILESTONE_KEYWORDS,
)
from services.container_classifier import (
    normalize_container_class,
    parse_free_days,
    resolve_direction,
)
from logging_config import get_logger

logger = get_logger(__name__)
settings = get_settings()

CLOCK_DATE_FIELDS = ("empty_pickup_date", "effective_return_date", "gate_in_date")


def _milestone_date(milestones: Iterable[Milestone], keywords: Tuple[str, ...]) -> Optional[date]:
    """Effective date of the first milestone whose name contains a keyword."""
    for milestone in milestones:
        name = (milestone.name or "").lower()
        if any(keyword in name for keyword in keywords):
            return milestone.effective_date
    return None


class ContainerRepository(BaseRepository[Container]):
    """Container registry read as engine snapshots."""

    def __init__(self, db: Session):
        """
        Initialize container repository.

        Args:
            db: Database session
        """
        super().__init__(Container, db)

    def get_by_number(self, shipment_reference: str, container_number: str) -> Optional[Container]:
        """
        Get a container of a shipment by its number.

        Args:
            shipment_reference: Shipment reference
            container_number: Normalized container number

        Returns:
            Container or None
        """
        return (
            self.db.query(Container)
            .join(Shipment)
            .filter(
                Shipment.reference == shipment_reference,
                Container.number == container_number.upper(),
            )
            .first()
        )

    def record_clock_dates(
        self,
        shipment_reference: str,
        container_number: str,
        **dates: Optional[date],
    ) -> Container:
        """
        Set the clock dates of a container.

        Only empty_pickup_date, effective_return_date and gate_in_date are
        accepted; passing None clears a date.

        Raises:
            ContainerNotFoundError: If the container does not exist
            ValidationError: On an unknown field
        """
        container = self.get_by_number(shipment_reference, container_number)
        if container is None:
            raise ContainerNotFoundError(
                f"Container {container_number} not found on shipment {shipment_reference}"
            )

        for field_name, value in dates.items():
            if field_name not in CLOCK_DATE_FIELDS:
                raise ValidationError(f"Unknown container date field: {field_name}")
            setattr(container, field_name, value)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating dates of container {container_number}: {e}")
            raise DatabaseError("Failed to update container dates") from e

        self.db.refresh(container)
        logger.info(
            f"Updated clock dates for container {container_number}",
            shipment=shipment_reference,
            fields=sorted(dates),
        )
        return container

    def list_snapshots(self) -> List[ContainerSnapshot]:
        """
        Load every container as an immutable snapshot.

        Arrival falls back to the shipment ETA when no arrival milestone has
        an effective date. Empty pickup and gate-in fall back to the
        shipment milestones when the container carries none.

        Returns:
            Snapshots in shipment/container order
        """
        shipments = (
            self.db.query(Shipment)
            .options(selectinload(Shipment.containers), selectinload(Shipment.milestones))
            .order_by(Shipment.id)
            .all()
        )

        snapshots = []
        for shipment in shipments:
            snapshots.extend(self._snapshots_for(shipment))

        logger.debug(f"Loaded {len(snapshots)} container snapshots from {len(shipments)} shipments")
        return snapshots

    def _snapshots_for(self, shipment: Shipment) -> List[ContainerSnapshot]:
        direction = resolve_direction(shipment.destination, settings.domestic_country_code)

        arrival = _milestone_date(shipment.milestones, ARRIVAL_MILESTONE_KEYWORDS) or shipment.eta
        pickup = _milestone_date(shipment.milestones, EMPTY_PICKUP_MILESTONE_KEYWORDS)
        gate_in = _milestone_date(shipment.milestones, GATE_IN_MILESTONE_KEYWORDS)

        return [
            ContainerSnapshot(
                shipment_id=shipment.reference,
                container_number=container.number,
                container_class=normalize_container_class(container.container_type),
                free_days=parse_free_days(container.free_time, shipment.free_time),
                direction=direction,
                carrier=shipment.carrier,
                customer=shipment.customer_name,
                customer_id=shipment.customer_id,
                arrival_date=arrival,
                empty_pickup_date=container.empty_pickup_date or pickup,
                return_date=container.effective_return_date,
                gate_in_date=container.gate_in_date or gate_in,
            )
            for container in shipment.containers
        ]
