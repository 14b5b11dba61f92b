from invoice_recon.reconciliation.engine import reconcile
from invoice_recon.reconciliation.layout import HEADERS, ColumnGroup, column_group
from invoice_recon.reconciliation.matchers import (
    AnomalyMatcher,
    AnomalyMatcherFactory,
    AttachAllMatcher,
    InvoiceIdMatcher,
    clean_anomalies,
)
from invoice_recon.reconciliation.models import DeliveryRecord, InvoiceRecord, ReconciledRow

__all__ = [
    "HEADERS",
    "AnomalyMatcher",
    "AnomalyMatcherFactory",
    "AttachAllMatcher",
    "ColumnGroup",
    "DeliveryRecord",
    "InvoiceIdMatcher",
    "InvoiceRecord",
    "ReconciledRow",
    "clean_anomalies",
    "column_group",
    "reconcile",
]
