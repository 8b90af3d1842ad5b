from typing import Optional


def truncate_body(body: Optional[str], limit: int = 400) -> str:
    """Shorten an upstream body before it goes into messages or logs."""
    if body is None:
        return ""
    if len(body) <= limit:
        return body
    return body[:limit] + "..."


class ParseJobError(Exception):
    """Base exception for document parse job failures.

    Attributes:
        message: Human-readable error description
        diagnostic: Technical diagnostic information for debugging
        job_id: Optional remote job identifier
    """
    def __init__(
        self,
        message: str,
        diagnostic: Optional[str] = None,
        job_id: Optional[str] = None
    ):
        self.message = message
        self.diagnostic = diagnostic
        self.job_id = job_id
        super().__init__(message)


class TransportError(ParseJobError):
    """Raised by the transport when no HTTP response could be obtained."""


class SubmissionError(ParseJobError):
    """Raised when the remote service rejects or garbles a job submission.

    Attributes:
        upstream_status: HTTP status code from the service (if any)
        upstream_body: Response body, already truncated
    """
    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
        diagnostic: Optional[str] = None,
    ):
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        super().__init__(message=message, diagnostic=diagnostic)


class PermanentPollError(ParseJobError):
    """Raised when a poll response can never turn into a result."""
    def __init__(
        self,
        job_id: str,
        message: str,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
        diagnostic: Optional[str] = None,
    ):
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        super().__init__(message=message, diagnostic=diagnostic, job_id=job_id)


class JobTimeoutError(ParseJobError):
    """Raised when a job is still pending at its deadline.

    Attributes:
        elapsed_seconds: Time elapsed before timeout
        timeout_seconds: Configured timeout value
    """
    def __init__(
        self,
        job_id: str,
        elapsed_seconds: float,
        timeout_seconds: float,
        diagnostic: Optional[str] = None
    ):
        self.elapsed_seconds = elapsed_seconds
        self.timeout_seconds = timeout_seconds
        message = f"Job {job_id} timed out after {elapsed_seconds:.1f}s (limit: {timeout_seconds}s)"
        super().__init__(message=message, diagnostic=diagnostic, job_id=job_id)


class JobCancelledError(ParseJobError):
    """Raised when the caller cancels a job while it is waiting."""
    def __init__(self, job_id: str):
        super().__init__(message=f"Job {job_id} was cancelled", job_id=job_id)


class InvalidTransitionError(ParseJobError):
    """Raised on an attempt to move a job out of a terminal state."""


class DocumentInputError(ParseJobError):
    """Raised when the request does not yield a document to parse."""


class ResultStoreError(ParseJobError):
    """Raised when a parsed result cannot be persisted."""
