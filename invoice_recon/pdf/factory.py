from invoice_recon.config.settings import Settings
from invoice_recon.logging.logger import Log
from invoice_recon.pdf.base import BasePdfInspector
from invoice_recon.pdf.pdfplumber_adapter import PdfPlumberAdapter
from invoice_recon.pdf.pymupdf_adapter import PyMuPdfAdapter

DEFAULT_ENGINE = "pdfplumber"


class PdfInspectorFactory:
    """Picks the engine that vets PDFs before they are uploaded.

    Only the page count is needed, so either engine will do; a blank
    ``pdf_engine`` falls back to ``DEFAULT_ENGINE``.
    """

    INSPECTORS: dict[str, type[BasePdfInspector]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfInspector:
        engine = settings.pdf_engine.strip().lower() or DEFAULT_ENGINE
        inspector_cls = cls.INSPECTORS.get(engine)
        if inspector_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.INSPECTORS)}"
            )
        Log.debug(f"Vetting uploads with {engine}")
        return inspector_cls()
