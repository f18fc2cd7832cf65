"""Tariff registry endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from constants import MAX_CARRIER_NAME_LENGTH
from models import ContainerClass, TariffTier, get_db
from repositories import TariffRepository

router = APIRouter()


class TierSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start: int = Field(ge=1)
    end: Optional[int] = None
    rate: float = Field(ge=0)


class CostTariffCreate(BaseModel):
    carrier: str = Field(min_length=1, max_length=MAX_CARRIER_NAME_LENGTH)
    container_class: ContainerClass
    tiers: List[TierSchema]


class SaleTariffCreate(BaseModel):
    container_class: ContainerClass
    tiers: List[TierSchema]


class CostTariffUpdate(BaseModel):
    carrier: Optional[str] = Field(default=None, min_length=1, max_length=MAX_CARRIER_NAME_LENGTH)
    container_class: Optional[ContainerClass] = None
    tiers: List[TierSchema]


class SaleTariffUpdate(BaseModel):
    tiers: List[TierSchema]


class TariffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    carrier: Optional[str]
    container_class: ContainerClass
    tiers: List[TierSchema]


def _tiers(schemas: List[TierSchema]) -> List[TariffTier]:
    return [TariffTier(start=t.start, end=t.end, rate=t.rate) for t in schemas]


@router.get("/tariffs/cost", response_model=List[TariffResponse])
async def list_cost_tariffs(db: Session = Depends(get_db)):
    """List carrier cost tariffs."""
    return TariffRepository(db).list_cost_tariffs()


@router.post("/tariffs/cost", response_model=TariffResponse, status_code=status.HTTP_201_CREATED)
async def create_cost_tariff(payload: CostTariffCreate, db: Session = Depends(get_db)):
    """Register a carrier cost tariff."""
    return TariffRepository(db).create_cost_tariff(
        payload.carrier, payload.container_class, _tiers(payload.tiers)
    )


@router.get("/tariffs/sale", response_model=List[TariffResponse])
async def list_sale_tariffs(db: Session = Depends(get_db)):
    """List customer sale tariffs."""
    return TariffRepository(db).list_sale_tariffs()


@router.post("/tariffs/sale", response_model=TariffResponse, status_code=status.HTTP_201_CREATED)
async def create_sale_tariff(payload: SaleTariffCreate, db: Session = Depends(get_db)):
    """Register the sale tariff for a container class."""
    return TariffRepository(db).create_sale_tariff(payload.container_class, _tiers(payload.tiers))


@router.put("/tariffs/cost/{tariff_id}", response_model=TariffResponse)
async def update_cost_tariff(tariff_id: int, payload: CostTariffUpdate, db: Session = Depends(get_db)):
    """Correct a carrier cost tariff."""
    return TariffRepository(db).update_cost_tariff(
        tariff_id,
        _tiers(payload.tiers),
        carrier=payload.carrier,
        container_class=payload.container_class,
    )


@router.put("/tariffs/sale/{tariff_id}", response_model=TariffResponse)
async def update_sale_tariff(tariff_id: int, payload: SaleTariffUpdate, db: Session = Depends(get_db)):
    """Correct the tiers of a sale tariff."""
    return TariffRepository(db).update_sale_tariff(tariff_id, _tiers(payload.tiers))
