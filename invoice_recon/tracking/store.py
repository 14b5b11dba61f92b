from dataclasses import dataclass, field

from invoice_recon.service.models import (
    ExtractedCsvData,
    JobResultPayload,
    JobSnapshot,
    JobStatus,
    LedgerFormat,
    SubmissionReceipt,
)


@dataclass
class JobStore:
    """Single owner of everything the tracker knows about jobs.

    Mutate only through the transition methods. Snapshots are replaced
    wholesale, never edited; results and extracted payloads are keyed by job
    and may arrive in either order.
    """

    current_job_id: str | None = None
    current_job: JobSnapshot | None = None
    roster: list[JobSnapshot] = field(default_factory=list)
    results: dict[str, JobResultPayload] = field(default_factory=dict)
    extracted: dict[str, ExtractedCsvData] = field(default_factory=dict)

    def record_submission(
        self,
        receipt: SubmissionReceipt,
        *,
        total_files: int,
        system_prompt: str,
        user_prompt: str,
        ledger_file: str | None = None,
        ledger_format: LedgerFormat | None = None,
    ) -> JobSnapshot:
        """Track a freshly accepted job as ``processing`` until the next poll."""
        snapshot = JobSnapshot(
            job_id=receipt.job_id,
            status=JobStatus.PROCESSING,
            created_at=receipt.created_at,
            total_files=total_files,
            ledger_file=ledger_file,
            ledger_format=ledger_format if ledger_file else None,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
        )
        self.current_job_id = snapshot.job_id
        self.current_job = snapshot
        return snapshot

    def select(self, job_id: str) -> JobSnapshot | None:
        """Make ``job_id`` the tracked job, seeding it from the roster if known."""
        self.current_job_id = job_id
        self.current_job = self.snapshot_of(job_id)
        return self.current_job

    def apply_status(self, snapshot: JobSnapshot) -> None:
        """Last fetch wins: overwrite every copy of this job's snapshot."""
        if snapshot.job_id == self.current_job_id:
            self.current_job = snapshot
        self.roster = [
            snapshot if job.job_id == snapshot.job_id else job for job in self.roster
        ]

    def replace_roster(self, roster: list[JobSnapshot]) -> None:
        self.roster = list(roster)

    def attach_results(self, payload: JobResultPayload) -> None:
        self.results[payload.job_id] = payload
        if payload.extracted is not None:
            self.extracted.setdefault(payload.job_id, payload.extracted)

    def attach_extracted(self, job_id: str, data: ExtractedCsvData) -> None:
        self.extracted[job_id] = data

    def forget(self, job_id: str) -> None:
        """Drop a deleted job from the roster and clear anything shown for it."""
        self.roster = [job for job in self.roster if job.job_id != job_id]
        self.results.pop(job_id, None)
        self.extracted.pop(job_id, None)
        if self.current_job_id == job_id:
            self.current_job_id = None
            self.current_job = None

    def snapshot_of(self, job_id: str) -> JobSnapshot | None:
        if self.current_job is not None and self.current_job.job_id == job_id:
            return self.current_job
        return next((job for job in self.roster if job.job_id == job_id), None)
