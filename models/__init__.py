"""Database models and engine value types."""
from models.database import Base, get_db, init_db
from models.shipment import Shipment, Milestone, Container
from models.tariff import CostTariff, SaleTariff
from models.ledger import LedgerEntry
from models.domain import (
    BillingItem,
    BillingKey,
    BillingStatus,
    ClockType,
    ContainerClass,
    ContainerSnapshot,
    Direction,
    ProrationResult,
    Tariff,
    TariffTier,
    TierChunk,
    Timeline,
)

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "Shipment",
    "Milestone",
    "Container",
    "CostTariff",
    "SaleTariff",
    "LedgerEntry",
    "BillingItem",
    "BillingKey",
    "BillingStatus",
    "ClockType",
    "ContainerClass",
    "ContainerSnapshot",
    "Direction",
    "ProrationResult",
    "Tariff",
    "TariffTier",
    "TierChunk",
    "Timeline",
]
