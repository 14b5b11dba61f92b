from pathlib import Path
from typing import ClassVar

from invoice_recon.config.settings import Settings
from invoice_recon.logging.logger import Log
from invoice_recon.pdf.base import BasePdfInspector
from invoice_recon.pdf.exceptions import PdfInspectionError
from invoice_recon.pdf.factory import PdfInspectorFactory
from invoice_recon.service.models import LedgerFormat, UploadFile
from invoice_recon.uploads.exceptions import InvalidUploadError

PDF_CONTENT_TYPE = "application/pdf"
CSV_CONTENT_TYPE = "text/csv"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class FileLoader:
    """Reads local files and vets them as job documents or ledger files."""

    LEDGER_TYPES: ClassVar[dict[str, tuple[str, LedgerFormat]]] = {
        ".csv": (CSV_CONTENT_TYPE, LedgerFormat.CSV),
        ".xlsx": (XLSX_CONTENT_TYPE, LedgerFormat.XLSX),
    }

    def __init__(self, pdf_inspector: BasePdfInspector, max_size_bytes: int) -> None:
        self._pdf_inspector = pdf_inspector
        self._max_size_bytes = max_size_bytes

    def load_pdf(self, path: Path) -> UploadFile:
        """Read a PDF from disk and validate it.

        Raises:
            FileNotFoundError: if the file does not exist.
            InvalidUploadError: if the file is not a PDF, is too large, or
                cannot be opened as a PDF.
        """
        if path.suffix.lower() != ".pdf":
            raise InvalidUploadError(f"File {path.name} is not a PDF. Only PDF files are allowed")
        upload = UploadFile(
            name=path.name,
            content=self._read(path),
            content_type=PDF_CONTENT_TYPE,
        )
        return self.validate_pdf(upload)

    def validate_pdf(self, upload: UploadFile) -> UploadFile:
        """Check type, size and readability; return the upload with its page count."""
        if upload.content_type != PDF_CONTENT_TYPE:
            raise InvalidUploadError(
                f"File {upload.name} is not a PDF. Only PDF files are allowed"
            )
        self._check_size(upload.name, upload.size)
        try:
            pages = self._pdf_inspector.page_count(upload.content)
        except PdfInspectionError as exc:
            raise InvalidUploadError(f"File {upload.name} is not a readable PDF: {exc}") from exc
        Log.debug(f"Validated {upload.name}: {pages} pages, {upload.size} bytes")
        return UploadFile(
            name=upload.name,
            content=upload.content,
            content_type=upload.content_type,
            page_count=pages,
        )

    def load_ledger(self, path: Path) -> tuple[UploadFile, LedgerFormat]:
        """Read a ledger file; its extension decides the ledger format.

        Raises:
            FileNotFoundError: if the file does not exist.
            InvalidUploadError: if the file is neither CSV nor XLSX.
        """
        known = self.LEDGER_TYPES.get(path.suffix.lower())
        if known is None:
            raise InvalidUploadError("Please select a valid CSV or Excel file for the ledger.")
        content_type, ledger_format = known
        upload = UploadFile(name=path.name, content=self._read(path), content_type=content_type)
        return upload, ledger_format

    def _read(self, path: Path) -> bytes:
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()

    def _check_size(self, name: str, size: int) -> None:
        if size > self._max_size_bytes:
            limit_mb = self._max_size_bytes / (1024 * 1024)
            raise InvalidUploadError(f"File {name} exceeds {limit_mb:g}MB limit")


def build_file_loader(settings: Settings) -> FileLoader:
    """Build a FileLoader using the configured PDF engine and size limit."""
    return FileLoader(PdfInspectorFactory.create(settings), settings.max_upload_size_bytes)
