"""Offline processing-service client.

Simulates the service in memory: a submitted job reports ``processing`` for a
few status polls, then ``completed`` with a fixed extraction payload. Useful
for local development, tests, and as a template for other transports.
"""

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone
from typing import ClassVar

from invoice_recon.service.client_base import BaseJobServiceClient
from invoice_recon.service.exceptions import (
    DeletionError,
    LedgerFetchError,
    PollError,
    ResultsFetchError,
    SubmissionError,
)
from invoice_recon.service.models import (
    ExtractedCsvData,
    JobResultPayload,
    JobSnapshot,
    JobStatus,
    LedgerFormat,
    SubmissionReceipt,
    UploadFile,
)


class ExampleJobServiceClient(BaseJobServiceClient):
    """In-memory stand-in for the processing service. No network calls."""

    DEFAULT_EXTRACTED: ClassVar[ExtractedCsvData] = ExtractedCsvData(
        invoice_rows=["2025-01-15,INV-001,ABC Company,1000.00,200.00,1200.00"],
        delivery_note_rows=["2025-01-16,DN-001,INV-001,2025-01-15,ABC Company"],
        anomaly_rows=[
            "Item missing in delivery note: Widget A",
            "Quantity mismatch for Item B: Invoice=5, Delivery=3",
        ],
    )

    def __init__(
        self,
        polls_until_complete: int = 2,
        extracted: ExtractedCsvData | None = None,
    ) -> None:
        self._polls_until_complete = polls_until_complete
        self._extracted = extracted or self.DEFAULT_EXTRACTED
        self._jobs: dict[str, JobSnapshot] = {}
        self._polls: dict[str, int] = {}
        self._counter = 0

    async def submit_job(
        self,
        files: Sequence[UploadFile],
        *,
        system_prompt: str,
        user_prompt: str,
        ledger_file: UploadFile | None = None,
        ledger_format: LedgerFormat | None = None,
    ) -> SubmissionReceipt:
        if not files:
            raise SubmissionError("No files provided")
        self._counter += 1
        job_id = f"job-{self._counter:03d}"
        created_at = datetime.now(timezone.utc).isoformat()
        self._jobs[job_id] = JobSnapshot(
            job_id=job_id,
            status=JobStatus.PROCESSING,
            created_at=created_at,
            total_files=len(files),
            ledger_file=ledger_file.name if ledger_file else None,
            ledger_format=ledger_format if ledger_file else None,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
        )
        self._polls[job_id] = 0
        return SubmissionReceipt(job_id=job_id, created_at=created_at)

    async def get_job_status(self, job_id: str) -> JobSnapshot:
        snapshot = self._jobs.get(job_id)
        if snapshot is None:
            raise PollError(f"Status fetch for {job_id} failed: Job not found", status_code=404)
        self._polls[job_id] += 1
        if (
            snapshot.status is JobStatus.PROCESSING
            and self._polls[job_id] >= self._polls_until_complete
        ):
            snapshot = replace(
                snapshot,
                status=JobStatus.COMPLETED,
                last_updated=datetime.now(timezone.utc).isoformat(),
            )
            self._jobs[job_id] = snapshot
        return snapshot

    async def get_job_results(self, job_id: str) -> JobResultPayload:
        snapshot = self._completed(job_id)
        return JobResultPayload(
            job_id=job_id,
            status=snapshot.status.value,
            completed_at=snapshot.last_updated,
            total_files=snapshot.total_files,
            successfully_processed=snapshot.total_files,
            failed_files=0,
            extracted=self._extracted,
        )

    async def get_extracted_data(self, job_id: str) -> ExtractedCsvData | None:
        self._completed(job_id)
        return self._extracted

    async def list_jobs(self) -> list[JobSnapshot]:
        return sorted(self._jobs.values(), key=lambda job: job.created_at, reverse=True)

    async def delete_job(self, job_id: str) -> str:
        if self._jobs.pop(job_id, None) is None:
            raise DeletionError("Job not found", status_code=404)
        self._polls.pop(job_id, None)
        return f"Job {job_id} deleted successfully"

    async def download_global_ledger(self, ledger_format: LedgerFormat) -> bytes:
        if ledger_format is not LedgerFormat.CSV:
            raise LedgerFetchError("Ledger download failed: HTTP 404", status_code=404)
        completed = [job for job in self._jobs.values() if job.status is JobStatus.COMPLETED]
        lines = [row for _ in completed for row in self._extracted.invoice_rows]
        return "\n".join(lines).encode("utf-8")

    def _completed(self, job_id: str) -> JobSnapshot:
        snapshot = self._jobs.get(job_id)
        if snapshot is None:
            raise ResultsFetchError(
                f"Results fetch for {job_id} failed: Job not found", status_code=404
            )
        if snapshot.status is not JobStatus.COMPLETED:
            raise ResultsFetchError(
                f"Results fetch for {job_id} failed: Job results not ready yet", status_code=404
            )
        return snapshot
