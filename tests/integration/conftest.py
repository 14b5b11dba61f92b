from pathlib import Path

import pytest

from invoice_recon.config.settings import Settings


@pytest.fixture()
def integration_settings(tmp_path: Path) -> Settings:
    """Settings pointing exports at a temp dir, with tiny timer intervals."""
    return Settings(
        _env_file=None,
        service_client="example",
        export_dir=str(tmp_path / "exports"),
        roster_refresh_interval_seconds=0.05,
        status_poll_interval_seconds=0.01,
    )


@pytest.fixture()
def pdf_on_disk(tmp_path: Path, multi_page_pdf_bytes: bytes) -> Path:
    path = tmp_path / "scan.pdf"
    path.write_bytes(multi_page_pdf_bytes)
    return path
