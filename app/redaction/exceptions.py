from app.analysis.models import JobStatus


class RedactionError(Exception):
    """Base exception for document redaction requests."""


class InvalidDocumentError(RedactionError):
    """Raised when an upload is empty, too large or of an unsupported type."""


class JobFailedError(RedactionError):
    """Raised when a provider job ends in a terminal status other than succeeded."""

    def __init__(self, job_id: str, status: JobStatus) -> None:
        super().__init__(f"Document analysis job {job_id} failed with status: {status.value}")
        self.job_id = job_id
        self.status = status
