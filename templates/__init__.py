"""Email and notification templates."""
from templates.email_templates import (
    EmailTemplate,
    ContainerChargeInvoiceEmailTemplate,
    get_email_template,
)

__all__ = [
    "EmailTemplate",
    "ContainerChargeInvoiceEmailTemplate",
    "get_email_template",
]
