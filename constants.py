"""Application-wide constants.

Free time, risk window and invoicing defaults are configured in
config.Settings; the values here are fixed by the tariff and milestone
conventions.
"""

# Container type markers (matched as substrings of the upper-cased type)
REEFER_MARKERS = ("RF", "REEFER")
SPECIAL_MARKERS = ("OT", "FR")

# Milestone name keywords (matched case-insensitively as substrings)
ARRIVAL_MILESTONE_KEYWORDS = ("arrival", "chegada")
EMPTY_PICKUP_MILESTONE_KEYWORDS = ("empty pickup", "retirada do vazio")
GATE_IN_MILESTONE_KEYWORDS = ("gate in",)

# Missing-tariff marker for the sale side
SALE_SCHEDULE_LABEL = "sale schedule"

# Open-ended tier placeholder in period labels
OPEN_ENDED_LABEL = "…"

# Ledger entry values
LEDGER_ENTRY_CREDIT = "credit"
LEDGER_STATUS_OPEN = "open"

# Date formats
DATE_FORMAT_DISPLAY = "%d/%m/%Y"

# Validation limits
MAX_CONTAINER_NUMBER_LENGTH = 11
MAX_CARRIER_NAME_LENGTH = 100

# Email templates
EMAIL_DEMURRAGE_INVOICE_SUBJECT = "Demurrage Invoice: {invoice_reference} | Shipment: {shipment_ref}"
EMAIL_DETENTION_INVOICE_SUBJECT = "Detention Invoice: {invoice_reference} | Shipment: {shipment_ref}"
BRL_EXCHANGE_MARGIN_PERCENT = 8
