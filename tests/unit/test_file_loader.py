from pathlib import Path
from unittest.mock import MagicMock

import pytest

from invoice_recon.config.settings import Settings
from invoice_recon.pdf.exceptions import PdfInspectionError
from invoice_recon.pdf.pdfplumber_adapter import PdfPlumberAdapter
from invoice_recon.service.models import LedgerFormat, UploadFile
from invoice_recon.uploads.exceptions import InvalidUploadError
from invoice_recon.uploads.file_loader import (
    CSV_CONTENT_TYPE,
    PDF_CONTENT_TYPE,
    XLSX_CONTENT_TYPE,
    FileLoader,
    build_file_loader,
)


def _make_loader(pages: int = 1, max_size_bytes: int = 1024) -> tuple[FileLoader, MagicMock]:
    inspector = MagicMock()
    inspector.page_count.return_value = pages
    return FileLoader(inspector, max_size_bytes), inspector


class TestLoadPdf:
    def test_returns_upload_with_page_count(self, tmp_path: Path) -> None:
        loader, inspector = _make_loader(pages=3)
        path = tmp_path / "invoice.pdf"
        path.write_bytes(b"%PDF test content")

        upload = loader.load_pdf(path)

        assert upload.name == "invoice.pdf"
        assert upload.content == b"%PDF test content"
        assert upload.content_type == PDF_CONTENT_TYPE
        assert upload.page_count == 3
        inspector.page_count.assert_called_once_with(b"%PDF test content")

    def test_uppercase_suffix_is_accepted(self, tmp_path: Path) -> None:
        loader, _ = _make_loader()
        path = tmp_path / "SCAN.PDF"
        path.write_bytes(b"%PDF")
        assert loader.load_pdf(path).name == "SCAN.PDF"

    def test_rejects_non_pdf(self, tmp_path: Path) -> None:
        loader, inspector = _make_loader()
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with pytest.raises(InvalidUploadError, match="notes.txt is not a PDF"):
            loader.load_pdf(path)
        inspector.page_count.assert_not_called()

    def test_rejects_oversized_file(self, tmp_path: Path) -> None:
        loader = FileLoader(MagicMock(), max_size_bytes=10 * 1024 * 1024)
        path = tmp_path / "big.pdf"
        path.write_bytes(b"0" * (10 * 1024 * 1024 + 1))

        with pytest.raises(InvalidUploadError, match="big.pdf exceeds 10MB limit"):
            loader.load_pdf(path)

    def test_file_at_limit_is_accepted(self, tmp_path: Path) -> None:
        loader, _ = _make_loader(max_size_bytes=4)
        path = tmp_path / "tiny.pdf"
        path.write_bytes(b"%PDF")
        assert loader.load_pdf(path).size == 4

    def test_unreadable_pdf(self, tmp_path: Path) -> None:
        loader, inspector = _make_loader()
        inspector.page_count.side_effect = PdfInspectionError("broken xref")
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"%PDF broken")

        with pytest.raises(InvalidUploadError, match="not a readable PDF"):
            loader.load_pdf(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        loader, _ = _make_loader()
        with pytest.raises(FileNotFoundError):
            loader.load_pdf(tmp_path / "missing.pdf")

    def test_real_pdf(self, tmp_path: Path, multi_page_pdf_bytes: bytes) -> None:
        loader = FileLoader(PdfPlumberAdapter(), max_size_bytes=1024 * 1024)
        path = tmp_path / "bundle.pdf"
        path.write_bytes(multi_page_pdf_bytes)
        assert loader.load_pdf(path).page_count == 2


class TestValidatePdf:
    def test_rejects_wrong_content_type(self) -> None:
        loader, _ = _make_loader()
        upload = UploadFile(name="a.png", content=b"png", content_type="image/png")
        with pytest.raises(InvalidUploadError, match="Only PDF files are allowed"):
            loader.validate_pdf(upload)


class TestLoadLedger:
    @pytest.mark.parametrize(
        "filename, content_type, ledger_format",
        [
            ("ledger.csv", CSV_CONTENT_TYPE, LedgerFormat.CSV),
            ("ledger.XLSX", XLSX_CONTENT_TYPE, LedgerFormat.XLSX),
        ],
    )
    def test_extension_selects_format(
        self, tmp_path: Path, filename: str, content_type: str, ledger_format: LedgerFormat
    ) -> None:
        loader, _ = _make_loader()
        path = tmp_path / filename
        path.write_bytes(b"ledger")

        upload, fmt = loader.load_ledger(path)

        assert upload.content_type == content_type
        assert fmt is ledger_format

    def test_ledger_is_not_size_limited(self, tmp_path: Path) -> None:
        loader, _ = _make_loader(max_size_bytes=4)
        path = tmp_path / "ledger.csv"
        path.write_bytes(b"a,b,c\n" * 100)
        upload, _ = loader.load_ledger(path)
        assert upload.size == 600

    def test_rejects_other_extensions(self, tmp_path: Path) -> None:
        loader, _ = _make_loader()
        path = tmp_path / "ledger.ods"
        path.write_bytes(b"x")
        with pytest.raises(InvalidUploadError, match="valid CSV or Excel file"):
            loader.load_ledger(path)


class TestBuildFileLoader:
    def test_uses_configured_engine_and_limit(
        self, tmp_path: Path, sample_pdf_bytes: bytes
    ) -> None:
        settings = Settings(_env_file=None, pdf_engine="pymupdf", max_upload_size_bytes=10)
        loader = build_file_loader(settings)
        path = tmp_path / "invoice.pdf"
        path.write_bytes(sample_pdf_bytes)

        with pytest.raises(InvalidUploadError, match="exceeds"):
            loader.load_pdf(path)

    def test_reads_real_pdf(self, tmp_path: Path, sample_pdf_bytes: bytes) -> None:
        loader = build_file_loader(Settings(_env_file=None, pdf_engine="pymupdf"))
        path = tmp_path / "invoice.pdf"
        path.write_bytes(sample_pdf_bytes)
        assert loader.load_pdf(path).page_count == 1
