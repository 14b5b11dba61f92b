from abc import ABC, abstractmethod
from collections.abc import Sequence

from invoice_recon.service.models import (
    ExtractedCsvData,
    JobResultPayload,
    JobSnapshot,
    LedgerFormat,
    SubmissionReceipt,
    UploadFile,
)


class BaseJobServiceClient(ABC):
    """Contract for talking to the document-processing service."""

    @abstractmethod
    async def submit_job(
        self,
        files: Sequence[UploadFile],
        *,
        system_prompt: str,
        user_prompt: str,
        ledger_file: UploadFile | None = None,
        ledger_format: LedgerFormat | None = None,
    ) -> SubmissionReceipt:
        """Create a job.

        Raises:
            SubmissionError: on a non-success response or transport failure.
        """

    @abstractmethod
    async def get_job_status(self, job_id: str) -> JobSnapshot:
        """Raises PollError."""

    @abstractmethod
    async def get_job_results(self, job_id: str) -> JobResultPayload:
        """Raises ResultsFetchError."""

    @abstractmethod
    async def get_extracted_data(self, job_id: str) -> ExtractedCsvData | None:
        """Return the extracted row lists, or None if the job has none yet.

        Raises:
            ResultsFetchError: on a non-success response or transport failure.
        """

    @abstractmethod
    async def list_jobs(self) -> list[JobSnapshot]:
        """Raises RosterFetchError."""

    @abstractmethod
    async def delete_job(self, job_id: str) -> str:
        """Delete a job and return the service message.

        Raises:
            DeletionError: with the service-reported detail.
        """

    @abstractmethod
    async def download_global_ledger(self, ledger_format: LedgerFormat) -> bytes:
        """Raises LedgerFetchError."""

    async def aclose(self) -> None:
        """Release transport resources. No-op by default."""
