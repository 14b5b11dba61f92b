"""Reconciliation of invoice and delivery-note rows into one export table.

Exposes:
- reconcile(invoice_rows, delivery_rows, anomaly_rows) -> list[ReconciledRow]
"""

from collections.abc import Iterable, Sequence

from invoice_recon.reconciliation.matchers import AnomalyMatcher, AttachAllMatcher
from invoice_recon.reconciliation.models import (
    EMPTY_DELIVERY,
    EMPTY_INVOICE,
    DeliveryRecord,
    InvoiceRecord,
    ReconciledRow,
)
from invoice_recon.reconciliation.parsing import parse_delivery, parse_invoice

ANOMALY_SEPARATOR = " | "


def reconcile(
    invoice_rows: Sequence[str],
    delivery_rows: Sequence[str],
    anomaly_rows: Sequence[str],
    matcher: AnomalyMatcher | None = None,
) -> list[ReconciledRow]:
    """Merge the three row lists into a deduplicated, ordered table.

    Invoice-driven rows come first, in input order, each carrying its matched
    delivery note (or blanks). Delivery notes no invoice claimed follow.
    Malformed rows are padded or truncated, never rejected.
    """
    matcher = matcher or AttachAllMatcher()
    anomalies = list(anomaly_rows)

    by_invoice: dict[str, DeliveryRecord] = {}
    unkeyed: list[DeliveryRecord] = []
    for line in delivery_rows:
        delivery = parse_delivery(line)
        if delivery.invoice_id:
            by_invoice[delivery.invoice_id] = delivery
        else:
            unkeyed.append(delivery)

    consumed: set[str] = set()
    rows: list[ReconciledRow] = []

    for line in invoice_rows:
        invoice = parse_invoice(line)
        delivery = by_invoice.get(invoice.invoice_id) if invoice.invoice_id else None
        if delivery is not None:
            consumed.add(invoice.invoice_id)
        rows.append(_build_row(invoice, delivery, matcher.match(invoice, delivery, anomalies)))

    unmatched = [d for key, d in by_invoice.items() if key not in consumed]
    for delivery in [*unmatched, *unkeyed]:
        rows.append(_build_row(None, delivery, matcher.match(None, delivery, anomalies)))

    return _deduplicate(row for row in rows if _has_content(row))


def _build_row(
    invoice: InvoiceRecord | None,
    delivery: DeliveryRecord | None,
    anomalies: list[str],
) -> ReconciledRow:
    return (
        *(invoice or EMPTY_INVOICE).fields(),
        *(delivery or EMPTY_DELIVERY).fields(),
        ANOMALY_SEPARATOR.join(anomalies),
    )


def _has_content(row: ReconciledRow) -> bool:
    return any(value.strip() for value in row)


def _deduplicate(rows: Iterable[ReconciledRow]) -> list[ReconciledRow]:
    seen: set[ReconciledRow] = set()
    unique: list[ReconciledRow] = []
    for row in rows:
        if row not in seen:
            seen.add(row)
            unique.append(row)
    return unique
