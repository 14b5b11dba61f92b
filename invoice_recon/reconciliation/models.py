from dataclasses import dataclass

ReconciledRow = tuple[str, ...]
"""Twelve fields: six invoice, five delivery, one anomaly."""


@dataclass(frozen=True)
class InvoiceRecord:
    """One invoice line as extracted upstream."""

    invoice_date: str = ""
    invoice_id: str = ""
    customer_name: str = ""
    amount_excl_vat: str = ""
    vat: str = ""
    total_amount: str = ""

    WIDTH = 6

    def fields(self) -> tuple[str, ...]:
        return (
            self.invoice_date,
            self.invoice_id,
            self.customer_name,
            self.amount_excl_vat,
            self.vat,
            self.total_amount,
        )


@dataclass(frozen=True)
class DeliveryRecord:
    """One delivery-note line; ``invoice_id`` is the join key and may be empty."""

    delivery_date: str = ""
    delivery_number: str = ""
    invoice_id: str = ""
    invoice_date: str = ""
    customer_name: str = ""

    WIDTH = 5

    def fields(self) -> tuple[str, ...]:
        return (
            self.delivery_date,
            self.delivery_number,
            self.invoice_id,
            self.invoice_date,
            self.customer_name,
        )


EMPTY_INVOICE = InvoiceRecord()
EMPTY_DELIVERY = DeliveryRecord()
