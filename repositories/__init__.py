"""Repository pattern for database access."""
from repositories.base import BaseRepository
from repositories.container_repository import ContainerRepository
from repositories.tariff_repository import TariffRepository
from repositories.ledger_repository import LedgerRepository

__all__ = [
    "BaseRepository",
    "ContainerRepository",
    "TariffRepository",
    "LedgerRepository",
]
