"""Billing engine and invoicing services."""
from services.billing_assembler import DemurrageBillingService, assemble_item, evaluate
from services.invoice_trigger import InvoiceTrigger, InvoiceResult, invoicing_blockers
from services.proration_engine import prorate

__all__ = [
    "DemurrageBillingService",
    "assemble_item",
    "evaluate",
    "InvoiceTrigger",
    "InvoiceResult",
    "invoicing_blockers",
    "prorate",
]
