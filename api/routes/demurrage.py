"""Demurrage and detention billing endpoints."""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_billing_service, get_invoice_trigger, get_today
from metrics import summarize
from models import BillingStatus, ClockType, ContainerClass
from services import DemurrageBillingService, InvoiceTrigger
from utils.validation import normalize_container_number

router = APIRouter()


class TierChunkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    period_label: str
    start_day: int
    end_day: Optional[int]
    days: int
    cost_rate: float
    sale_rate: float
    cost: float
    sale: float
    profit: float
    first_date: Optional[date]
    last_date: Optional[date]


class BillingItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shipment_id: str
    container_number: str
    clock_type: ClockType
    container_class: ContainerClass
    carrier: str
    customer: str
    free_days: int
    clock_start: date
    free_time_expiry: date
    effective_end: Optional[date]
    overdue_days: int
    status: BillingStatus
    chunks: List[TierChunkResponse]
    total_cost: float
    total_sale: float
    total_profit: float
    unrated_days: int
    missing_tariff: Optional[str]
    invoiced_on: Optional[date]


class SummaryResponse(BaseModel):
    as_of: date
    total_items: int
    overdue_items: int
    at_risk_items: int
    ok_items: int
    invoiced_items: int
    demurrage_items: int
    detention_items: int
    missing_tariff_items: int
    total_overdue_days: int
    total_cost: float
    total_sale: float
    total_profit: float
    missing_tariffs: List[str]


class InvoiceRequest(BaseModel):
    allow_mid_period: bool = False
    customer_id: Optional[int] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    due_date: Optional[date] = None
    exchange_rate: Optional[str] = None


class InvoiceResponse(BaseModel):
    ledger_entry_id: int
    invoice_reference: str
    amount: float
    currency: str
    due_date: date
    email_subject: str
    email_body: str


@router.get("/demurrage/items", response_model=List[BillingItemResponse])
async def list_items(
    status: Optional[BillingStatus] = None,
    clock_type: Optional[ClockType] = None,
    service: DemurrageBillingService = Depends(get_billing_service),
):
    """List billing items, optionally filtered by status and clock type."""
    items = service.evaluate()
    if status is not None:
        items = [item for item in items if item.status == status]
    if clock_type is not None:
        items = [item for item in items if item.clock_type == clock_type]
    return items


@router.get("/demurrage/summary", response_model=SummaryResponse)
async def get_summary(
    service: DemurrageBillingService = Depends(get_billing_service),
    today: date = Depends(get_today),
):
    """Counts and money totals for the current pass."""
    return summarize(service.evaluate(), today).to_dict()


@router.get(
    "/demurrage/items/{shipment_id}/{container_number}/{clock_type}",
    response_model=BillingItemResponse,
)
async def get_item(
    shipment_id: str,
    container_number: str,
    clock_type: ClockType,
    service: DemurrageBillingService = Depends(get_billing_service),
):
    """Get one billing item."""
    return service.get_item(shipment_id, normalize_container_number(container_number), clock_type)


@router.post(
    "/demurrage/items/{shipment_id}/{container_number}/{clock_type}/invoice",
    response_model=InvoiceResponse,
    status_code=201,
)
async def invoice_item(
    shipment_id: str,
    container_number: str,
    clock_type: ClockType,
    request: InvoiceRequest,
    service: DemurrageBillingService = Depends(get_billing_service),
    trigger: InvoiceTrigger = Depends(get_invoice_trigger),
    today: date = Depends(get_today),
):
    """Raise the ledger entry and invoice email for a billing item."""
    item = service.get_item(shipment_id, normalize_container_number(container_number), clock_type)

    result = trigger.invoice(
        item,
        customer_id=request.customer_id,
        currency=request.currency,
        due_date=request.due_date,
        allow_mid_period=request.allow_mid_period,
        invoiced_on=today,
        exchange_rate=request.exchange_rate,
    )

    return InvoiceResponse(
        ledger_entry_id=result.ledger_entry_id,
        invoice_reference=result.invoice_reference,
        amount=result.amount,
        currency=result.currency,
        due_date=result.due_date,
        email_subject=result.email["subject"],
        email_body=result.email["body"],
    )
