"""Selection of the cost and sale tariffs that apply to a container."""
from dataclasses import dataclass
from typing import Iterable, Optional

from constants import SALE_SCHEDULE_LABEL
from models.domain import ContainerClass, Tariff


@dataclass(frozen=True)
class TariffMatch:
    """
    Result of matching both schedules.

    missing names the absent side: the carrier for cost, "sale schedule"
    for sale. Cost is reported first when both are absent.
    """

    cost: Optional[Tariff]
    sale: Optional[Tariff]
    missing: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.missing is None


def _same(left: Optional[str], right: Optional[str]) -> bool:
    return (left or "").strip().casefold() == (right or "").strip().casefold()


def match_tariffs(
    container_class: ContainerClass,
    carrier: str,
    cost_tariffs: Iterable[Tariff],
    sale_tariffs: Iterable[Tariff],
) -> TariffMatch:
    """
    Match tariffs exactly and case-insensitively. There is no fallback.

    Args:
        container_class: Normalized container class
        carrier: Operating carrier name
        cost_tariffs: Carrier cost schedules
        sale_tariffs: Customer sale schedules

    Returns:
        TariffMatch
    """
    cost = next(
        (
            tariff for tariff in cost_tariffs
            if _same(tariff.carrier, carrier) and _same(tariff.container_class.value, container_class.value)
        ),
        None,
    )
    sale = next(
        (
            tariff for tariff in sale_tariffs
            if _same(tariff.container_class.value, container_class.value)
        ),
        None,
    )

    missing = None
    if cost is None:
        missing = carrier or "unknown carrier"
    elif sale is None:
        missing = SALE_SCHEDULE_LABEL

    return TariffMatch(cost=cost, sale=sale, missing=missing)
