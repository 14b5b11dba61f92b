class PdfInspectionError(Exception):
    """Raised when a PDF cannot be opened or has no pages."""
