import asyncio
import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from invoice_recon.config.settings import Settings


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page invoice PDF."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Invoice INV-001")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF: an invoice and its delivery note."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Invoice INV-001")
    c.showPage()
    c.drawString(72, 720, "Delivery note DN-001")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def settings() -> Settings:
    """Settings with short intervals and no .env influence."""
    return Settings(
        _env_file=None,
        roster_refresh_interval_seconds=10.0,
        status_poll_interval_seconds=3.0,
    )


@pytest.fixture()
def recorded_sleep() -> tuple[list[float], object]:
    """A sleep replacement that records intervals and yields to the loop once."""
    calls: list[float] = []

    async def fake_sleep(interval: float) -> None:
        calls.append(interval)
        await asyncio.sleep(0)

    return calls, fake_sleep
