class JobServiceError(Exception):
    """Base exception for all processing-service errors.

    ``status_code`` is set when the service answered with an error status.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SubmissionError(JobServiceError):
    """Raised when the service rejects a job or cannot be reached on submit."""


class PollError(JobServiceError):
    """Raised when a job status cannot be fetched."""


class RosterFetchError(JobServiceError):
    """Raised when the job list cannot be fetched."""


class ResultsFetchError(JobServiceError):
    """Raised when job results or the extracted payload cannot be fetched."""


class DeletionError(JobServiceError):
    """Raised when the service refuses or fails to delete a job."""


class LedgerFetchError(JobServiceError):
    """Raised when the global ledger file cannot be downloaded."""


class PayloadError(JobServiceError):
    """Raised when a service response does not have the expected shape."""
