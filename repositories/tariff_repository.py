"""Repository for cost and sale tariffs."""
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exceptions import TariffNotFoundError, TariffValidationError
from models import ContainerClass, CostTariff, SaleTariff, Tariff, TariffTier
from repositories.base import BaseRepository
from utils.validation import tiers_from_records, tiers_to_records, validate_tariff_tiers
from logging_config import get_logger

logger = get_logger(__name__)


def _to_domain(row, carrier=None) -> Tariff:
    return Tariff(
        id=row.id,
        carrier=carrier,
        container_class=ContainerClass(row.container_class),
        tiers=tiers_from_records(row.tiers or []),
    )


class TariffRepository(BaseRepository[CostTariff]):
    """Both tariff registries, read as engine tariffs."""

    def __init__(self, db: Session):
        """
        Initialize tariff repository.

        Args:
            db: Database session
        """
        super().__init__(CostTariff, db)

    def list_cost_tariffs(self) -> List[Tariff]:
        """Get all carrier cost tariffs."""
        rows = self.db.query(CostTariff).order_by(CostTariff.carrier, CostTariff.container_class).all()
        return [_to_domain(row, carrier=row.carrier) for row in rows]

    def list_sale_tariffs(self) -> List[Tariff]:
        """Get all customer sale tariffs."""
        rows = self.db.query(SaleTariff).order_by(SaleTariff.container_class).all()
        return [_to_domain(row) for row in rows]

    def create_cost_tariff(
        self,
        carrier: str,
        container_class: ContainerClass,
        tiers: Iterable[TariffTier],
    ) -> Tariff:
        """
        Register a carrier cost tariff.

        Raises:
            TariffValidationError: If the tiers are not contiguous, or the
                carrier already has a tariff for the class
        """
        tiers = validate_tariff_tiers(tiers)
        carrier = carrier.strip()
        if not carrier:
            raise TariffValidationError("Cost tariff requires a carrier")

        row = CostTariff(
            carrier=carrier,
            container_class=container_class.value,
            tiers=tiers_to_records(tiers),
        )
        self._save(row, f"cost tariff {carrier}/{container_class.value}")
        return _to_domain(row, carrier=row.carrier)

    def create_sale_tariff(self, container_class: ContainerClass, tiers: Iterable[TariffTier]) -> Tariff:
        """
        Register the sale tariff for a container class.

        Raises:
            TariffValidationError: If the tiers are not contiguous, or the
                class already has a sale tariff
        """
        tiers = validate_tariff_tiers(tiers)

        row = SaleTariff(container_class=container_class.value, tiers=tiers_to_records(tiers))
        self._save(row, f"sale tariff {container_class.value}")
        return _to_domain(row)

    def update_cost_tariff(
        self,
        tariff_id: int,
        tiers: Iterable[TariffTier],
        carrier: Optional[str] = None,
        container_class: Optional[ContainerClass] = None,
    ) -> Tariff:
        """
        Replace the tiers of a carrier cost tariff, optionally re-keying it.

        Raises:
            TariffNotFoundError: If no cost tariff has the ID
            TariffValidationError: If the tiers are not contiguous, or the new
                carrier and class are already registered
        """
        row = self.get_by_id(tariff_id)
        if row is None:
            raise TariffNotFoundError(f"Cost tariff {tariff_id} not found")

        tiers = validate_tariff_tiers(tiers)
        if carrier is not None:
            carrier = carrier.strip()
            if not carrier:
                raise TariffValidationError("Cost tariff requires a carrier")
            row.carrier = carrier
        if container_class is not None:
            row.container_class = container_class.value
        row.tiers = tiers_to_records(tiers)

        self._save(row, f"cost tariff {row.carrier}/{row.container_class}", created=False)
        return _to_domain(row, carrier=row.carrier)

    def update_sale_tariff(self, tariff_id: int, tiers: Iterable[TariffTier]) -> Tariff:
        """
        Replace the tiers of a sale tariff.

        Raises:
            TariffNotFoundError: If no sale tariff has the ID
            TariffValidationError: If the tiers are not contiguous
        """
        row = self.db.get(SaleTariff, tariff_id)
        if row is None:
            raise TariffNotFoundError(f"Sale tariff {tariff_id} not found")

        tiers = validate_tariff_tiers(tiers)
        row.tiers = tiers_to_records(tiers)

        self._save(row, f"sale tariff {row.container_class}", created=False)
        return _to_domain(row)

    def _save(self, row, label: str, created: bool = True) -> None:
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise TariffValidationError(f"Duplicate {label}") from e
        self.db.refresh(row)
        action = "Registered" if created else "Updated"
        logger.info(f"{action} {label} with {len(row.tiers)} tiers")
