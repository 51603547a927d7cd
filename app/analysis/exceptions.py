class AnalysisError(Exception):
    """Base exception for document-analysis job failures."""


class ProviderHttpError(AnalysisError):
    """The provider answered with a non-2xx status."""

    def __init__(self, message: str, *, status: int, body: str) -> None:
        super().__init__(f"{message}: {status} - {body}")
        self.status = status
        self.body = body


class SubmissionError(ProviderHttpError):
    """Raised when the provider rejects a job submission."""


class JobStatusError(ProviderHttpError):
    """Raised when a job status request is rejected."""


class ProviderNetworkError(AnalysisError):
    """Raised when the provider cannot be reached."""


class ProtocolError(AnalysisError):
    """Raised when a provider response violates the expected contract."""


class PollTimeoutError(AnalysisError):
    """Raised when a job stays non-terminal for the whole polling budget."""

    def __init__(self, job_id: str, attempts: int) -> None:
        super().__init__(f"Job {job_id} did not complete within {attempts} polling attempts")
        self.job_id = job_id
        self.attempts = attempts


class InvariantViolationError(AnalysisError):
    """Raised when a caller uses an API out of its documented order."""


class NoResultError(AnalysisError):
    """Raised when a succeeded job reports no processed document or no targets."""


class ArtifactNotFoundError(AnalysisError):
    """Raised when every target of a processed document is a metadata descriptor."""
