from urllib.parse import quote, urlsplit

import httpx
from pydantic import ValidationError

from app.analysis.exceptions import (
    JobStatusError,
    ProtocolError,
    ProviderNetworkError,
    SubmissionError,
)
from app.analysis.models import AnalysisJob
from app.auth.credentials import BaseProviderAuth
from app.logging.logger import Log

JOB_LOCATION_HEADER = "operation-location"


def job_id_from_location(location: str) -> str:
    """Last path segment of a job-location URL is the job id.

    Raises:
        ProtocolError: if the URL has no path segment to take.
    """
    segments = [segment for segment in urlsplit(location.strip()).path.split("/") if segment]
    if not segments:
        raise ProtocolError(f"Cannot extract job id from location '{location}'")
    return segments[-1]


class AnalysisClient:
    """HTTP client for the asynchronous document-analysis job API."""

    JOBS_PATH = "/language/analyze-documents/jobs"

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        endpoint: str,
        auth: BaseProviderAuth,
        api_version: str = "2024-11-15-preview",
        language: str = "en-US",
        document_id: str = "doc_0",
        task_name: str = "Redact PII Task",
        redaction_policy: str = "entityMask",
        exclude_extraction_data: bool = False,
    ) -> None:
        if not endpoint:
            raise ValueError("Analysis endpoint must not be empty")
        self._http = http_client
        self._jobs_url = f"{endpoint.rstrip('/')}{self.JOBS_PATH}"
        self._auth = auth
        self._api_version = api_version
        self._language = language
        self._document_id = document_id
        self._task_name = task_name
        self._redaction_policy = redaction_policy
        self._exclude_extraction_data = exclude_extraction_data

    async def submit(self, source_url: str, target_container_url: str, file_name: str) -> str:
        """Submit one document for PII redaction and return the provider job id.

        Raises:
            SubmissionError: on any non-2xx response.
            ProtocolError: if a 2xx response carries no job-location header.
            ProviderNetworkError: if the provider cannot be reached.
            CredentialError: if no auth header can be produced.
        """
        payload = self._build_payload(source_url, target_container_url, file_name)
        response = await self._send("POST", self._jobs_url, json=payload)

        if not response.is_success:
            raise SubmissionError(
                "Failed to submit analysis job",
                status=response.status_code,
                body=response.text,
            )

        location = response.headers.get(JOB_LOCATION_HEADER)
        if not location:
            raise ProtocolError(
                f"{JOB_LOCATION_HEADER} header not found in response "
                f"(status {response.status_code})"
            )
        job_id = job_id_from_location(location)
        Log.info("Analysis job submitted", job_id=job_id, file=file_name)
        return job_id

    async def get_job(self, job_id: str) -> AnalysisJob:
        """Fetch one snapshot of a job.

        Raises:
            JobStatusError: on any non-2xx response.
            ProtocolError: if the body is not a valid job document.
            ProviderNetworkError: if the provider cannot be reached.
        """
        response = await self._send("GET", f"{self._jobs_url}/{quote(job_id, safe='')}")
        if not response.is_success:
            raise JobStatusError(
                f"Failed to fetch status of job {job_id}",
                status=response.status_code,
                body=response.text,
            )
        try:
            return AnalysisJob.model_validate_json(response.content)
        except ValidationError as exc:
            raise ProtocolError(f"Invalid job status response for {job_id}: {exc}") from exc

    def _build_payload(
        self,
        source_url: str,
        target_container_url: str,
        file_name: str,
    ) -> dict[str, object]:
        return {
            "displayName": f"PII Redaction: {file_name}",
            "analysisInput": {
                "documents": [
                    {
                        "language": self._language,
                        "id": self._document_id,
                        "source": {"location": source_url},
                        "target": {"location": target_container_url},
                    }
                ]
            },
            "tasks": [
                {
                    "kind": "PiiEntityRecognition",
                    "taskName": self._task_name,
                    "parameters": {
                        "redactionPolicy": {"policyKind": self._redaction_policy},
                        "excludeExtractionData": self._exclude_extraction_data,
                    },
                }
            ],
        }

    async def _send(
        self,
        method: str,
        url: str,
        json: dict[str, object] | None = None,
    ) -> httpx.Response:
        headers = await self._auth.headers()
        try:
            return await self._http.request(
                method,
                url,
                params={"api-version": self._api_version},
                json=json,
                headers=headers,
            )
        except httpx.TransportError as exc:
            raise ProviderNetworkError(f"Analysis provider network error: {exc}") from exc
