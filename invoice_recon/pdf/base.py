from abc import ABC, abstractmethod


class BasePdfInspector(ABC):
    """Contract for PDF adapters used to vet uploads before submission."""

    @abstractmethod
    def page_count(self, pdf_bytes: bytes) -> int:
        """Open the PDF and count its pages.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Number of pages, always at least one.

        Raises:
            PdfInspectionError: if the bytes are not a readable PDF or the
                document has no pages.
        """
