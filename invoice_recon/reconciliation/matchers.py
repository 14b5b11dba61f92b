from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import ClassVar

from invoice_recon.reconciliation.models import DeliveryRecord, InvoiceRecord

IGNORED_ANOMALY_PHRASES: tuple[str, ...] = (
    "Missing financial data in delivery note: No subtotal, VAT, or total amounts provided",
)


class AnomalyMatcher(ABC):
    """Decides which anomaly notes belong on a reconciled row."""

    @abstractmethod
    def match(
        self,
        invoice: InvoiceRecord | None,
        delivery: DeliveryRecord | None,
        anomalies: Sequence[str],
    ) -> list[str]:
        """Return the anomalies to attach to the row built from this pair.

        Args:
            invoice: The invoice half, or None for an unmatched delivery row.
            delivery: The matched delivery half, or None.
            anomalies: Every anomaly note of the job, in input order.
        """


class AttachAllMatcher(AnomalyMatcher):
    """Attaches the whole anomaly set to every invoice-driven row.

    Unmatched delivery rows get no anomalies.
    """

    def match(
        self,
        invoice: InvoiceRecord | None,
        delivery: DeliveryRecord | None,
        anomalies: Sequence[str],
    ) -> list[str]:
        if invoice is None:
            return []
        return list(anomalies)


class InvoiceIdMatcher(AnomalyMatcher):
    """Attaches the anomalies whose text mentions the row's invoice ID."""

    def match(
        self,
        invoice: InvoiceRecord | None,
        delivery: DeliveryRecord | None,
        anomalies: Sequence[str],
    ) -> list[str]:
        invoice_id = ""
        if invoice is not None and invoice.invoice_id:
            invoice_id = invoice.invoice_id
        elif delivery is not None:
            invoice_id = delivery.invoice_id
        if not invoice_id:
            return []
        return [note for note in anomalies if invoice_id in note]


class AnomalyMatcherFactory:
    """Creates the anomaly matcher named in settings."""

    MATCHERS: ClassVar[dict[str, type[AnomalyMatcher]]] = {
        "attach_all": AttachAllMatcher,
        "invoice_id": InvoiceIdMatcher,
    }

    @classmethod
    def create(cls, name: str) -> AnomalyMatcher:
        matcher_cls = cls.MATCHERS.get(name.lower())
        if matcher_cls is None:
            raise ValueError(
                f"Unknown anomaly matching '{name}'. Choose from: {list(cls.MATCHERS)}"
            )
        return matcher_cls()


def clean_anomalies(
    anomalies: Iterable[str],
    ignored_phrases: Iterable[str] = IGNORED_ANOMALY_PHRASES,
) -> list[str]:
    """Drop blank notes and notes containing a known-noise phrase."""
    ignored = tuple(ignored_phrases)
    return [
        note
        for note in anomalies
        if note.strip() and not any(phrase in note for phrase in ignored)
    ]
