class InvalidUploadError(Exception):
    """Raised when a file is rejected before it is sent to the service."""
