"""Column layout of the reconciled table, shared by every export format."""

from enum import Enum


class ColumnGroup(str, Enum):
    INVOICE = "invoice"
    DELIVERY = "delivery"
    ANOMALY = "anomaly"


HEADERS: tuple[str, ...] = (
    "Invoice date",
    "Invoice ID",
    "Customer name",
    "Invoice amount (No VAT)",
    "VAT",
    "Total Amount",
    "Delivery note date",
    "Delivery note number",
    "Invoice number",
    "Invoice date",
    "Customer name",
    "Anomaly Type",
)

COLUMN_GROUPS: tuple[ColumnGroup, ...] = (
    (ColumnGroup.INVOICE,) * 6 + (ColumnGroup.DELIVERY,) * 5 + (ColumnGroup.ANOMALY,)
)

ANOMALY_COLUMN = len(HEADERS) - 1


def column_group(index: int) -> ColumnGroup:
    """Group of the zero-based column ``index``."""
    return COLUMN_GROUPS[index]
