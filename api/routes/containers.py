"""Container clock date endpoints."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from models import get_db
from repositories import ContainerRepository
from utils.validation import normalize_container_number

router = APIRouter()


class ContainerDatesUpdate(BaseModel):
    empty_pickup_date: Optional[date] = None
    effective_return_date: Optional[date] = None
    gate_in_date: Optional[date] = None


class ContainerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    number: str
    container_type: Optional[str]
    free_time: Optional[str]
    empty_pickup_date: Optional[date]
    effective_return_date: Optional[date]
    gate_in_date: Optional[date]


@router.patch("/containers/{shipment_id}/{container_number}/dates", response_model=ContainerResponse)
async def update_container_dates(
    shipment_id: str,
    container_number: str,
    payload: ContainerDatesUpdate,
    db: Session = Depends(get_db),
):
    """Record the return, pickup or gate-in date that stops or starts a clock."""
    return ContainerRepository(db).record_clock_dates(
        shipment_id,
        normalize_container_number(container_number),
        **payload.model_dump(exclude_unset=True),
    )
