class ExportError(Exception):
    """Raised when a reconciled table cannot be produced or written."""
