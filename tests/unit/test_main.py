from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from invoice_recon.logging.logger import Log
from invoice_recon.main import build_parser, main
from invoice_recon.service.client_base import BaseJobServiceClient
from invoice_recon.service.exceptions import DeletionError, PollError
from invoice_recon.service.models import (
    ExtractedCsvData,
    JobSnapshot,
    JobStatus,
    SubmissionReceipt,
)


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[AsyncMock]:
    monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "exports"))
    mock_client = AsyncMock(spec=BaseJobServiceClient)
    with (
        patch("invoice_recon.main.JobServiceClientFactory.create", return_value=mock_client),
        patch.object(Log, "configure"),
    ):
        yield mock_client


class TestParser:
    def test_submit_arguments(self) -> None:
        args = build_parser().parse_args(["submit", "a.pdf", "b.pdf", "--ledger", "l.csv", "--wait"])
        assert args.command == "submit"
        assert args.files == [Path("a.pdf"), Path("b.pdf")]
        assert args.ledger == Path("l.csv")
        assert args.wait is True

    def test_export_format_is_validated(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["export", "job-001", "--format", "pdf"])


class TestCommands:
    def test_list(self, client: AsyncMock, capsys: pytest.CaptureFixture[str]) -> None:
        client.list_jobs.return_value = [
            JobSnapshot(job_id="job-001", status=JobStatus.COMPLETED, total_files=2),
            JobSnapshot(job_id="job-002", status=JobStatus.FAILED, error="OCR failed"),
        ]

        assert main(["list"]) == 0

        out = capsys.readouterr().out
        assert "job-001  completed" in out
        assert "error=OCR failed" in out
        client.aclose.assert_awaited_once()

    def test_status(self, client: AsyncMock, capsys: pytest.CaptureFixture[str]) -> None:
        client.get_job_status.return_value = JobSnapshot(job_id="job-001", status=JobStatus.PROCESSING)
        assert main(["status", "job-001"]) == 0
        assert "job-001  processing" in capsys.readouterr().out

    def test_status_unknown(self, client: AsyncMock, capsys: pytest.CaptureFixture[str]) -> None:
        client.get_job_status.side_effect = PollError("Job not found", status_code=404)
        assert main(["status", "job-404"]) == 1
        assert "unknown" in capsys.readouterr().err

    def test_delete_failure(self, client: AsyncMock, capsys: pytest.CaptureFixture[str]) -> None:
        client.delete_job.side_effect = DeletionError("Job not found", status_code=404)
        assert main(["delete", "job-404"]) == 1
        assert "Error: Job not found" in capsys.readouterr().err

    def test_export(self, client: AsyncMock, tmp_path: Path) -> None:
        client.get_extracted_data.return_value = ExtractedCsvData(
            invoice_rows=["2025-01-15,INV-001,Acme,100,20,120"]
        )
        assert main(["export", "job-001", "--format", "xlsx"]) == 0
        assert (tmp_path / "exports" / "extracted_data_job-001.xlsx").is_file()

    def test_submit(
        self,
        client: AsyncMock,
        tmp_path: Path,
        sample_pdf_bytes: bytes,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        pdf = tmp_path / "invoice.pdf"
        pdf.write_bytes(sample_pdf_bytes)
        client.submit_job.return_value = SubmissionReceipt(job_id="job-001", created_at="t0")

        assert main(["submit", str(pdf)]) == 0

        assert "job-001  processing" in capsys.readouterr().out
        files = client.submit_job.await_args.args[0]
        assert [f.name for f in files] == ["invoice.pdf"]

    def test_submit_rejects_non_pdf(
        self, client: AsyncMock, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        txt = tmp_path / "notes.txt"
        txt.write_text("hi")

        assert main(["submit", str(txt)]) == 1

        assert "Only PDF files are allowed" in capsys.readouterr().err
        client.submit_job.assert_not_awaited()
