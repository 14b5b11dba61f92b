from dataclasses import dataclass, field
from enum import Enum


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class LedgerFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"


@dataclass(frozen=True)
class JobSnapshot:
    """Service-reported state of one job. Replaced on every fetch, never edited."""

    job_id: str
    status: JobStatus
    created_at: str = ""
    total_files: int = 0
    last_updated: str | None = None
    ledger_file: str | None = None
    ledger_format: LedgerFormat | None = None
    error: str | None = None
    system_prompt: str = ""
    user_prompt: str = ""


@dataclass(frozen=True)
class ExtractedCsvData:
    """The three raw row lists the reconciliation engine consumes."""

    invoice_rows: list[str] = field(default_factory=list)
    delivery_note_rows: list[str] = field(default_factory=list)
    anomaly_rows: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OcrSummary:
    total_pages: int = 0
    total_words: int = 0
    tables_extracted: int = 0


@dataclass(frozen=True)
class ProcessedFile:
    original_filename: str
    stored_filename: str = ""
    file_number: int = 0
    status: str = ""
    ocr: OcrSummary | None = None


@dataclass(frozen=True)
class LlmAnalysis:
    response: str = ""
    model_used: str = ""
    total_tokens: int = 0
    context_length: int = 0


@dataclass(frozen=True)
class LedgerUpdate:
    invoice_rows_added: int = 0
    delivery_note_rows_added: int = 0
    anomaly_rows_added: int = 0
    updated_ledger_path: str = ""
    format: LedgerFormat = LedgerFormat.CSV


@dataclass(frozen=True)
class JobResultPayload:
    """Everything the service reports for a completed job."""

    job_id: str
    status: str = ""
    completed_at: str | None = None
    total_files: int = 0
    successfully_processed: int = 0
    failed_files: int = 0
    processed_files: list[ProcessedFile] = field(default_factory=list)
    llm_analysis: LlmAnalysis | None = None
    extracted: ExtractedCsvData | None = None
    ledger_update: LedgerUpdate | None = None


@dataclass(frozen=True)
class UploadFile:
    """A file ready to be sent in a multipart submission."""

    name: str
    content: bytes
    content_type: str
    page_count: int | None = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class SubmissionReceipt:
    """What the service returns when it accepts a job."""

    job_id: str
    created_at: str = ""
