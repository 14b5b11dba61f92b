from collections.abc import Sequence
from typing import Any, ClassVar

import httpx

from invoice_recon.logging.logger import Log
from invoice_recon.service.client_base import BaseJobServiceClient
from invoice_recon.service.exceptions import (
    DeletionError,
    JobServiceError,
    LedgerFetchError,
    PayloadError,
    PollError,
    ResultsFetchError,
    RosterFetchError,
    SubmissionError,
)
from invoice_recon.service.models import (
    ExtractedCsvData,
    JobResultPayload,
    JobSnapshot,
    LedgerFormat,
    SubmissionReceipt,
    UploadFile,
)
from invoice_recon.service.parsing import (
    build_extracted,
    build_results,
    build_roster,
    build_snapshot,
)


class HttpJobServiceClient(BaseJobServiceClient):
    """Processing-service client built on httpx.AsyncClient."""

    SUBMIT_PATHS: ClassVar[dict[LedgerFormat | None, str]] = {
        None: "/upload-multiple-pdfs",
        LedgerFormat.CSV: "/upload-multiple-pdfs-with-ledger",
        LedgerFormat.XLSX: "/upload-multiple-pdfs-with-ledger-xlsx",
    }
    LEDGER_PATHS: ClassVar[dict[LedgerFormat, str]] = {
        LedgerFormat.CSV: "/ledger/csv",
        LedgerFormat.XLSX: "/ledger/download",
    }

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def submit_job(
        self,
        files: Sequence[UploadFile],
        *,
        system_prompt: str,
        user_prompt: str,
        ledger_file: UploadFile | None = None,
        ledger_format: LedgerFormat | None = None,
    ) -> SubmissionReceipt:
        if ledger_file is None:
            ledger_format = None
        elif ledger_format is None:
            raise SubmissionError("Ledger format is required when a ledger file is sent")
        multipart = [("files", (f.name, f.content, f.content_type)) for f in files]
        if ledger_file is not None:
            multipart.append(
                ("ledger_file", (ledger_file.name, ledger_file.content, ledger_file.content_type))
            )
        body = await self._request(
            "POST",
            self.SUBMIT_PATHS[ledger_format],
            SubmissionError,
            "Upload failed",
            files=multipart,
            data={"system_prompt": system_prompt, "user_prompt": user_prompt},
        )
        job_id = body.get("job_id") if isinstance(body, dict) else None
        if not job_id or not isinstance(job_id, str):
            raise SubmissionError("Upload failed: service response has no job_id")
        created_at = body.get("created_at")
        return SubmissionReceipt(
            job_id=job_id,
            created_at=created_at if isinstance(created_at, str) else "",
        )

    async def get_job_status(self, job_id: str) -> JobSnapshot:
        body = await self._request(
            "GET", f"/job-status/{job_id}", PollError, f"Status fetch for {job_id} failed"
        )
        try:
            return build_snapshot(body)
        except PayloadError as exc:
            raise PollError(f"Status fetch for {job_id} failed: {exc}") from exc

    async def get_job_results(self, job_id: str) -> JobResultPayload:
        body = await self._request(
            "GET", f"/job-results/{job_id}", ResultsFetchError, f"Results fetch for {job_id} failed"
        )
        try:
            return build_results(body)
        except PayloadError as exc:
            raise ResultsFetchError(f"Results fetch for {job_id} failed: {exc}") from exc

    async def get_extracted_data(self, job_id: str) -> ExtractedCsvData | None:
        body = await self._request(
            "GET",
            f"/job-results/{job_id}",
            ResultsFetchError,
            f"Extracted data fetch for {job_id} failed",
        )
        return build_extracted(body)

    async def list_jobs(self) -> list[JobSnapshot]:
        body = await self._request("GET", "/jobs", RosterFetchError, "Job list fetch failed")
        try:
            return build_roster(body)
        except PayloadError as exc:
            raise RosterFetchError(f"Job list fetch failed: {exc}") from exc

    async def delete_job(self, job_id: str) -> str:
        body = await self._request("DELETE", f"/job/{job_id}", DeletionError, "Delete failed")
        message = body.get("message") if isinstance(body, dict) else None
        return message if isinstance(message, str) else f"Job {job_id} deleted"

    async def download_global_ledger(self, ledger_format: LedgerFormat) -> bytes:
        path = self.LEDGER_PATHS[ledger_format]
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as exc:
            raise LedgerFetchError(f"Ledger download failed: network error: {exc}") from exc
        if response.is_error:
            raise LedgerFetchError(
                f"Ledger download failed: {_error_detail(response)}",
                status_code=response.status_code,
            )
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        error_cls: type[JobServiceError],
        action: str,
        **kwargs: Any,
    ) -> Any:
        """Send a request and decode its JSON body.

        Any transport error, error status or undecodable body is raised as
        ``error_cls`` with a readable message.
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            Log.debug(f"{method} {path} transport error: {exc}")
            raise error_cls(f"{action}: network error: {exc}") from exc
        if response.is_error:
            detail = _error_detail(response)
            message = detail if error_cls in _VERBATIM_DETAIL else f"{action}: {detail}"
            raise error_cls(message, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise error_cls(f"{action}: response is not valid JSON") from exc


_VERBATIM_DETAIL: tuple[type[JobServiceError], ...] = (SubmissionError, DeletionError)


def _error_detail(response: httpx.Response) -> str:
    """Service ``detail`` string when present, otherwise the HTTP status."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"]
    return f"HTTP {response.status_code}"
