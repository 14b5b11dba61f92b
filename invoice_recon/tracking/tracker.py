import asyncio
from collections.abc import Coroutine, Sequence
from typing import Any

from invoice_recon.config.settings import Settings
from invoice_recon.logging.logger import Log
from invoice_recon.service.client_base import BaseJobServiceClient
from invoice_recon.service.exceptions import DeletionError, JobServiceError, SubmissionError
from invoice_recon.service.models import JobSnapshot, JobStatus, LedgerFormat, UploadFile
from invoice_recon.service.prompt_loader import load_prompt
from invoice_recon.tracking.scheduler import PeriodicTimer, PollSupervisor, Sleep
from invoice_recon.tracking.store import JobStore


class JobTracker:
    """Submits jobs and keeps the JobStore in step with the processing service.

    While running, two timers are active: a roster refresh and, for the
    tracked job while it is non-terminal, a status poll. Poll and roster
    failures are logged and leave the last good state in place; submission and
    deletion failures are raised to the caller.
    """

    def __init__(
        self,
        client: BaseJobServiceClient,
        settings: Settings,
        store: JobStore | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._settings = settings
        self._store = store if store is not None else JobStore()
        self._sleep = sleep
        self._supervisor = PollSupervisor(
            settings.status_poll_interval_seconds, self.poll, sleep=sleep
        )
        self._roster_timer: PeriodicTimer | None = None
        self._follow_ups: set[asyncio.Task[None]] = set()
        self._terminal_events: dict[str, asyncio.Event] = {}
        self._running = False

    @property
    def store(self) -> JobStore:
        return self._store

    @property
    def running(self) -> bool:
        return self._running

    async def __aenter__(self) -> "JobTracker":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def start(self) -> None:
        """Load the roster once, then start the timers."""
        if self._running:
            return
        self._running = True
        await self.list_all()
        self._roster_timer = PeriodicTimer(
            "roster-refresh",
            self._settings.roster_refresh_interval_seconds,
            self.list_all,
            sleep=self._sleep,
        )
        self._roster_timer.start()
        self._supervise()
        Log.info("Job tracker started")

    async def stop(self) -> None:
        """Cancel both timers. In-flight requests are left to finish."""
        if not self._running:
            return
        self._running = False
        if self._roster_timer is not None:
            self._roster_timer.cancel()
            self._roster_timer = None
        self._supervisor.shutdown()
        Log.info("Job tracker stopped")

    async def submit(
        self,
        files: Sequence[UploadFile],
        *,
        ledger_file: UploadFile | None = None,
        ledger_format: LedgerFormat | None = None,
        system_prompt: str | None = None,
        user_prompt: str | None = None,
    ) -> JobSnapshot:
        """Create a job and make it the tracked job.

        Raises:
            SubmissionError: with the service detail; nothing is recorded.
        """
        system_prompt = system_prompt if system_prompt is not None else load_prompt("system_prompt")
        user_prompt = user_prompt if user_prompt is not None else load_prompt("user_prompt")
        try:
            receipt = await self._client.submit_job(
                files,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                ledger_file=ledger_file,
                ledger_format=ledger_format,
            )
        except SubmissionError as exc:
            Log.error(f"Upload failed: {exc}", file_count=len(files))
            raise
        snapshot = self._store.record_submission(
            receipt,
            total_files=len(files),
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            ledger_file=ledger_file.name if ledger_file else None,
            ledger_format=ledger_format,
        )
        Log.info(f"Job {snapshot.job_id} submitted", file_count=len(files))
        self._supervise()
        return snapshot

    async def poll(self, job_id: str) -> JobSnapshot | None:
        """Fetch and store the job status.

        On ``completed`` the results and extracted payload are fetched in the
        background; this call does not wait for them. A failed fetch returns
        the last known snapshot.
        """
        try:
            snapshot = await self._client.get_job_status(job_id)
        except JobServiceError as exc:
            Log.warning(f"Status poll failed, keeping last snapshot: {exc}", job_id=job_id)
            return self._store.snapshot_of(job_id)

        self._store.apply_status(snapshot)
        Log.debug(f"Job {job_id} is {snapshot.status.value}")
        if snapshot.status is JobStatus.COMPLETED:
            self._spawn(self._fetch_results(job_id))
            self._spawn(self._fetch_extracted(job_id))
        if snapshot.status.is_terminal:
            self._release_waiters(job_id)
            if snapshot.status is JobStatus.FAILED:
                Log.warning(f"Job {job_id} failed: {snapshot.error or 'no detail'}")
        self._supervise()
        return snapshot

    async def list_all(self) -> list[JobSnapshot]:
        """Replace the roster with the service's job list."""
        try:
            roster = await self._client.list_jobs()
        except JobServiceError as exc:
            Log.warning(f"Roster refresh failed, keeping last roster: {exc}")
            return self._store.roster
        self._store.replace_roster(roster)
        return roster

    async def remove(self, job_id: str) -> str:
        """Delete a job on the service, then forget it locally.

        Raises:
            DeletionError: with the service detail; local state is untouched.
        """
        try:
            message = await self._client.delete_job(job_id)
        except DeletionError as exc:
            Log.error(f"Delete failed: {exc}", job_id=job_id)
            raise
        self._store.forget(job_id)
        self._release_waiters(job_id)
        Log.info(message, job_id=job_id)
        self._supervise()
        return message

    async def view(self, job_id: str) -> JobSnapshot | None:
        """Track a historical job and refresh its status.

        A completed job gets its results and extracted payload re-fetched by
        ``poll``; a non-terminal one is polled on the timer from here on.
        """
        self._store.select(job_id)
        self._supervise()
        return await self.poll(job_id)

    async def wait_for_terminal(self, job_id: str) -> JobSnapshot | None:
        """Block until a poll observes ``job_id`` as completed or failed.

        Returns None if the job is removed while waiting.
        """
        snapshot = self._store.snapshot_of(job_id)
        if snapshot is None or not snapshot.status.is_terminal:
            await self._terminal_event(job_id).wait()
        return self._store.snapshot_of(job_id)

    async def wait_for_follow_ups(self) -> None:
        """Await the background result fetches started by ``poll``."""
        while self._follow_ups:
            await asyncio.gather(*list(self._follow_ups))

    def _supervise(self) -> None:
        if self._running:
            self._supervisor.ensure(self._store.current_job)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._follow_ups.add(task)
        task.add_done_callback(self._follow_ups.discard)

    def _terminal_event(self, job_id: str) -> asyncio.Event:
        return self._terminal_events.setdefault(job_id, asyncio.Event())

    def _release_waiters(self, job_id: str) -> None:
        event = self._terminal_events.pop(job_id, None)
        if event is not None:
            event.set()

    async def _fetch_results(self, job_id: str) -> None:
        try:
            payload = await self._client.get_job_results(job_id)
        except JobServiceError as exc:
            Log.warning(f"Results fetch failed: {exc}", job_id=job_id)
            return
        self._store.attach_results(payload)

    async def _fetch_extracted(self, job_id: str) -> None:
        try:
            data = await self._client.get_extracted_data(job_id)
        except JobServiceError as exc:
            Log.warning(f"Extracted data fetch failed: {exc}", job_id=job_id)
            return
        if data is not None:
            self._store.attach_extracted(job_id, data)
