"""Structural parsing of raw delimited rows into fixed-width records."""

from invoice_recon.reconciliation.models import DeliveryRecord, InvoiceRecord

DELIMITER = ","


def split_fields(line: str | None, width: int, delimiter: str = DELIMITER) -> list[str]:
    """Split a raw row into exactly ``width`` trimmed fields.

    Short rows are right-padded with empty strings, long rows truncated.
    Never raises on malformed input.
    """
    parts = [part.strip() for part in (line or "").split(delimiter)]
    if len(parts) < width:
        parts.extend([""] * (width - len(parts)))
    return parts[:width]


def parse_invoice(line: str | None, delimiter: str = DELIMITER) -> InvoiceRecord:
    return InvoiceRecord(*split_fields(line, InvoiceRecord.WIDTH, delimiter))


def parse_delivery(line: str | None, delimiter: str = DELIMITER) -> DeliveryRecord:
    return DeliveryRecord(*split_fields(line, DeliveryRecord.WIDTH, delimiter))
