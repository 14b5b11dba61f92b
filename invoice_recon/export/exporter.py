from enum import Enum
from pathlib import Path

from invoice_recon.config.settings import Settings
from invoice_recon.export.csv_writer import to_csv
from invoice_recon.export.exceptions import ExportError
from invoice_recon.export.xlsx_writer import to_xlsx_bytes
from invoice_recon.logging.logger import Log
from invoice_recon.reconciliation.engine import reconcile
from invoice_recon.reconciliation.matchers import (
    AnomalyMatcher,
    AnomalyMatcherFactory,
    clean_anomalies,
)
from invoice_recon.reconciliation.models import ReconciledRow
from invoice_recon.service.client_base import BaseJobServiceClient
from invoice_recon.service.exceptions import LedgerFetchError, ResultsFetchError
from invoice_recon.service.models import LedgerFormat


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"


class ExportService:
    """Fetches a job's extracted rows, reconciles them and writes the table.

    Nothing is cached: every export re-fetches and re-reconciles.
    """

    def __init__(
        self,
        client: BaseJobServiceClient,
        export_dir: Path,
        matcher: AnomalyMatcher,
        filter_ignored_anomalies: bool = False,
    ) -> None:
        self._client = client
        self._export_dir = export_dir
        self._matcher = matcher
        self._filter_ignored_anomalies = filter_ignored_anomalies

    async def build_table(self, job_id: str) -> list[ReconciledRow]:
        """Reconciled rows for ``job_id``; empty when the job has no extracted data.

        Raises:
            ExportError: if the job results cannot be fetched.
        """
        try:
            extracted = await self._client.get_extracted_data(job_id)
        except ResultsFetchError as exc:
            reason = exc.status_code if exc.status_code is not None else exc
            raise ExportError(f"Failed to fetch job results: {reason}") from exc
        if extracted is None:
            Log.warning("Job has no extracted data, exporting header only", job_id=job_id)
            return []
        anomalies = extracted.anomaly_rows
        if self._filter_ignored_anomalies:
            anomalies = clean_anomalies(anomalies)
        rows = reconcile(
            extracted.invoice_rows,
            extracted.delivery_note_rows,
            anomalies,
            matcher=self._matcher,
        )
        Log.info(
            f"Reconciled {len(rows)} rows",
            job_id=job_id,
            invoice_rows=len(extracted.invoice_rows),
            delivery_rows=len(extracted.delivery_note_rows),
        )
        return rows

    async def export(self, job_id: str, export_format: ExportFormat) -> Path:
        """Write ``extracted_data_{job_id}.{csv|xlsx}`` into the export directory."""
        rows = await self.build_table(job_id)
        path = self._export_dir / f"extracted_data_{job_id}.{export_format.value}"
        self._write(path, render(rows, export_format))
        Log.info(f"Exported {path}", job_id=job_id)
        return path

    async def save_global_ledger(self, ledger_format: LedgerFormat) -> Path:
        """Download the service-maintained ledger into the export directory."""
        try:
            content = await self._client.download_global_ledger(ledger_format)
        except LedgerFetchError as exc:
            raise ExportError(str(exc)) from exc
        path = self._export_dir / f"global_ledger.{ledger_format.value}"
        self._write(path, content)
        Log.info(f"Saved global ledger to {path}")
        return path

    @staticmethod
    def _write(path: Path, content: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as exc:
            raise ExportError(f"Failed to write {path}: {exc}") from exc


def render(rows: list[ReconciledRow], export_format: ExportFormat) -> bytes:
    if export_format is ExportFormat.CSV:
        return to_csv(rows).encode("utf-8")
    return to_xlsx_bytes(rows)


def build_exporter(settings: Settings, client: BaseJobServiceClient) -> ExportService:
    """Build an ExportService wired from settings."""
    return ExportService(
        client=client,
        export_dir=Path(settings.export_dir),
        matcher=AnomalyMatcherFactory.create(settings.anomaly_matching),
        filter_ignored_anomalies=settings.filter_ignored_anomalies,
    )
