"""Immutable value types consumed and produced by the billing engine."""
from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ContainerClass(str, Enum):
    """Tariff-relevant container class."""
    DRY = "dry"
    REEFER = "reefer"
    SPECIAL = "special"


class Direction(str, Enum):
    """Shipment direction relative to the domestic country."""
    IMPORT = "import"
    EXPORT = "export"


class ClockType(str, Enum):
    """Which free-time clock a billing item measures."""
    DEMURRAGE = "demurrage"
    DETENTION = "detention"


class BillingStatus(str, Enum):
    """Billing item status."""
    OK = "ok"
    AT_RISK = "at_risk"
    OVERDUE = "overdue"
    INVOICED = "invoiced"


@dataclass(frozen=True)
class TariffTier:
    """Day range (1 = first day after free time) charged at a flat daily rate."""

    start: int
    end: Optional[int]
    rate: float

    @property
    def is_open_ended(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class Tariff:
    """
    Rate schedule.

    Cost tariffs carry the carrier; sale tariffs leave it as None.
    """

    container_class: ContainerClass
    tiers: Tuple[TariffTier, ...]
    carrier: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class ContainerSnapshot:
    """Clock-relevant facts for one container of one shipment."""

    shipment_id: str
    container_number: str
    container_class: ContainerClass
    free_days: int
    direction: Direction
    carrier: str = ""
    customer: str = ""
    customer_id: Optional[int] = None
    arrival_date: Optional[date] = None
    empty_pickup_date: Optional[date] = None
    return_date: Optional[date] = None
    gate_in_date: Optional[date] = None

    @property
    def clock_type(self) -> ClockType:
        if self.direction == Direction.IMPORT:
            return ClockType.DEMURRAGE
        return ClockType.DETENTION


@dataclass(frozen=True)
class Timeline:
    clock_type: ClockType
    clock_start: date
    free_time_expiry: date
    effective_end: Optional[date]


@dataclass(frozen=True)
class TierChunk:
    """One tier-bounded slice of the overdue days."""

    period_label: str
    start_day: int
    end_day: Optional[int]
    days: int
    cost_rate: float
    sale_rate: float
    cost: float
    sale: float
    profit: float
    first_date: Optional[date] = None
    last_date: Optional[date] = None


@dataclass(frozen=True)
class ProrationResult:
    chunks: Tuple[TierChunk, ...] = ()
    total_cost: float = 0.0
    total_sale: float = 0.0
    total_profit: float = 0.0
    unrated_days: int = 0

    @property
    def rated_days(self) -> int:
        return sum(chunk.days for chunk in self.chunks)


BillingKey = Tuple[str, str, ClockType]


@dataclass(frozen=True)
class BillingItem:
    """Computed liability for one container under one clock type."""

    shipment_id: str
    container_number: str
    clock_type: ClockType
    container_class: ContainerClass
    carrier: str
    customer: str
    customer_id: Optional[int]
    free_days: int
    clock_start: date
    free_time_expiry: date
    effective_end: Optional[date]
    overdue_days: int
    status: BillingStatus
    chunks: Tuple[TierChunk, ...] = ()
    total_cost: float = 0.0
    total_sale: float = 0.0
    total_profit: float = 0.0
    unrated_days: int = 0
    missing_tariff: Optional[str] = None
    invoiced_on: Optional[date] = None

    @property
    def key(self) -> BillingKey:
        return (self.shipment_id, self.container_number, self.clock_type)

    @property
    def has_breakdown(self) -> bool:
        return self.missing_tariff is None

    @property
    def is_running(self) -> bool:
        return self.effective_end is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
