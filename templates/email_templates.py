"""Email templates for container charge notifications."""

from typing import Any, Dict

from constants import (
    BRL_EXCHANGE_MARGIN_PERCENT,
    EMAIL_DEMURRAGE_INVOICE_SUBJECT,
    EMAIL_DETENTION_INVOICE_SUBJECT,
)


class EmailTemplate:
    """Base class for email templates."""

    def __init__(self, data: Dict[str, Any]):
        self.data = data

    def render_subject(self) -> str:
        """Render email subject."""
        raise NotImplementedError

    def render_body_text(self) -> str:
        """Render plain text email body."""
        raise NotImplementedError

    def render(self) -> Dict[str, str]:
        return {"subject": self.render_subject(), "body": self.render_body_text()}


class ContainerChargeInvoiceEmailTemplate(EmailTemplate):
    """Invoice email for a demurrage or detention charge."""

    def render_subject(self) -> str:
        template = (
            EMAIL_DETENTION_INVOICE_SUBJECT
            if self.data.get("clock_type") == "detention"
            else EMAIL_DEMURRAGE_INVOICE_SUBJECT
        )
        return template.format(
            invoice_reference=self.data.get("invoice_reference", ""),
            shipment_ref=self.data.get("shipment_id", ""),
        )

    def render_body_text(self) -> str:
        customer_name = self.data.get("customer_name") or "Valued Customer"
        charge_name = self.data.get("clock_type", "demurrage")
        currency = self.data.get("currency", "USD")
        total_amount = self.data.get("total_amount", 0.0)
        overdue_days = self.data.get("overdue_days", 0)
        chunks = self.data.get("chunks", [])
        exchange_rate = self.data.get("exchange_rate")

        lines = [
            f"Dear {customer_name},",
            "",
            (
                f"Please find below the {charge_name} invoice for container "
                f"{self.data.get('container_number', '')} on shipment {self.data.get('shipment_id', '')}."
            ),
            "",
            "Invoice Details:",
            "-----------------",
            f"Invoice Number: {self.data.get('invoice_reference', '')}",
            f"Shipment: {self.data.get('shipment_id', '')}",
            f"Container: {self.data.get('container_number', '')}",
            f"Days Over Free Time: {overdue_days}",
            f"Total Amount: {currency} {total_amount:,.2f}",
            f"Due Date: {self.data.get('due_date', '')}",
        ]

        if chunks:
            lines.append("")
            lines.append("Breakdown:")
            for chunk in chunks:
                lines.append(
                    f"- {chunk['period_label']}: {chunk['days']} days x "
                    f"{currency} {chunk['sale_rate']:,.2f} = {currency} {chunk['sale']:,.2f}"
                )

        if exchange_rate:
            lines.extend(
                [
                    "",
                    (
                        "Please note that payment must be made in Brazilian Reais (BRL). "
                        "The PTAX rate of the payment date will be used, plus a "
                        f"{BRL_EXCHANGE_MARGIN_PERCENT}% margin. Today's reference rate is {exchange_rate}."
                    ),
                ]
            )

        lines.extend(
            [
                "",
                "The payment slip and tax invoice are attached.",
                "If you have any questions regarding this charge, please don't hesitate to contact us.",
                "",
                "Best regards,",
                "Billing Department",
            ]
        )

        return "\n".join(lines)


def get_email_template(template_type: str, data: Dict[str, Any]) -> EmailTemplate:
    """
    Get email template by type.

    Raises:
        ValueError: If template_type is unknown
    """
    templates = {
        "container_charge_invoice": ContainerChargeInvoiceEmailTemplate,
    }

    template_class = templates.get(template_type)
    if template_class is None:
        raise ValueError(f"Unknown email template type: {template_type}")

    return template_class(data)
