"""Builds service models from decoded JSON responses."""

from typing import Any

from invoice_recon.logging.logger import Log
from invoice_recon.service.exceptions import PayloadError
from invoice_recon.service.models import (
    ExtractedCsvData,
    JobResultPayload,
    JobSnapshot,
    JobStatus,
    LedgerFormat,
    LedgerUpdate,
    LlmAnalysis,
    OcrSummary,
    ProcessedFile,
)

_VALID_STATUSES = frozenset(status.value for status in JobStatus)


def build_snapshot(data: Any) -> JobSnapshot:
    """Build a JobSnapshot from a ``/job-status`` body or a ``/jobs`` entry.

    Raises:
        PayloadError: if ``job_id`` or ``status`` is missing or unknown.
    """
    if not isinstance(data, dict):
        raise PayloadError("Job snapshot must be an object")
    job_id = data.get("job_id")
    if not job_id or not isinstance(job_id, str):
        raise PayloadError("'job_id' must be a non-empty string")
    status = data.get("status")
    if status not in _VALID_STATUSES:
        raise PayloadError(f"Job {job_id}: unknown status {status!r}")
    return JobSnapshot(
        job_id=job_id,
        status=JobStatus(status),
        created_at=_str(data.get("created_at")),
        total_files=_int(data.get("total_files")),
        last_updated=_optional_str(data.get("last_updated")),
        ledger_file=_optional_str(data.get("ledger_file")),
        ledger_format=_ledger_format(data.get("ledger_format")),
        error=_optional_str(data.get("error") or data.get("error_message")),
        system_prompt=_str(data.get("system_prompt")),
        user_prompt=_str(data.get("user_prompt")),
    )


def build_roster(data: Any) -> list[JobSnapshot]:
    """Build the roster from a ``/jobs`` body, skipping malformed entries."""
    if not isinstance(data, dict) or not isinstance(data.get("jobs", []), list):
        raise PayloadError("Job list must be an object with a 'jobs' list")
    roster: list[JobSnapshot] = []
    for index, entry in enumerate(data.get("jobs", [])):
        try:
            roster.append(build_snapshot(entry))
        except PayloadError as exc:
            Log.warning(f"Skipping roster entry {index}: {exc}")
    return roster


def build_extracted(data: Any) -> ExtractedCsvData | None:
    """Pull ``extracted_csv_data.csv_data`` out of a ``/job-results`` body.

    Returns None when the job carries no extracted payload. Non-list row
    containers become empty lists; non-string rows are stringified.
    """
    if not isinstance(data, dict):
        return None
    extracted = data.get("extracted_csv_data")
    if not isinstance(extracted, dict):
        return None
    csv_data = extracted.get("csv_data")
    if not isinstance(csv_data, dict):
        csv_data = {}
    return ExtractedCsvData(
        invoice_rows=_rows(csv_data.get("invoice_rows")),
        delivery_note_rows=_rows(csv_data.get("delivery_note_rows")),
        anomaly_rows=_rows(csv_data.get("anomaly_rows")),
    )


def build_results(data: Any) -> JobResultPayload:
    if not isinstance(data, dict):
        raise PayloadError("Job results must be an object")
    job_id = data.get("job_id")
    if not job_id or not isinstance(job_id, str):
        raise PayloadError("'job_id' must be a non-empty string")
    return JobResultPayload(
        job_id=job_id,
        status=_str(data.get("status")),
        completed_at=_optional_str(data.get("completed_at")),
        total_files=_int(data.get("total_files")),
        successfully_processed=_int(data.get("successfully_processed")),
        failed_files=_int(data.get("failed_files")),
        processed_files=_processed_files(data.get("processed_files")),
        llm_analysis=_llm_analysis(data.get("llm_analysis")),
        extracted=build_extracted(data),
        ledger_update=_ledger_update(data.get("ledger_update")),
    )


def _processed_files(raw: Any) -> list[ProcessedFile]:
    if not isinstance(raw, list):
        return []
    files: list[ProcessedFile] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        ocr = item.get("ocr_result")
        summary = None
        if isinstance(ocr, dict):
            tables = ocr.get("tables")
            summary = OcrSummary(
                total_pages=_int(ocr.get("total_pages")),
                total_words=_int(ocr.get("total_words")),
                tables_extracted=_int(
                    item.get("tables_extracted", len(tables) if isinstance(tables, list) else 0)
                ),
            )
        files.append(
            ProcessedFile(
                original_filename=_str(item.get("original_filename")),
                stored_filename=_str(item.get("stored_filename")),
                file_number=_int(item.get("file_number")),
                status=_str(item.get("status")),
                ocr=summary,
            )
        )
    return files


def _llm_analysis(raw: Any) -> LlmAnalysis | None:
    if not isinstance(raw, dict):
        return None
    return LlmAnalysis(
        response=_str(raw.get("response")),
        model_used=_str(raw.get("model_used")),
        total_tokens=_int(raw.get("total_tokens")),
        context_length=_int(raw.get("context_length")),
    )


def _ledger_update(raw: Any) -> LedgerUpdate | None:
    if not isinstance(raw, dict):
        return None
    return LedgerUpdate(
        invoice_rows_added=_int(raw.get("invoice_rows_added")),
        delivery_note_rows_added=_int(raw.get("delivery_note_rows_added")),
        anomaly_rows_added=_int(raw.get("anomaly_rows_added")),
        updated_ledger_path=_str(raw.get("updated_ledger_path")),
        format=_ledger_format(raw.get("format")) or LedgerFormat.CSV,
    )


def _ledger_format(raw: Any) -> LedgerFormat | None:
    if isinstance(raw, str) and raw.lower() in ("csv", "xlsx"):
        return LedgerFormat(raw.lower())
    return None


def _rows(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [item if isinstance(item, str) else str(item) for item in raw if item is not None]


def _str(raw: Any) -> str:
    return raw if isinstance(raw, str) else ""


def _optional_str(raw: Any) -> str | None:
    return raw if isinstance(raw, str) and raw else None


def _int(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0
