import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import BinaryIO

from app.analysis.client import AnalysisClient
from app.analysis.models import JobStatus
from app.analysis.poller import JobPoller
from app.analysis.resolver import ResultResolver
from app.extraction.preview import DocumentPreviewer
from app.logging.logger import Log
from app.redaction.base import BaseDocumentRedactor
from app.redaction.exceptions import JobFailedError
from app.redaction.models import RedactionResult
from app.redaction.validation import UploadPolicy
from app.storage.base import BaseArtifactStore
from app.storage.models import Permission
from app.storage.signing import BaseSignedUrlIssuer


class NativeDocumentRedactor(BaseDocumentRedactor):
    """Redacts whole documents through the remote analysis provider.

    Pipeline: upload -> sign source/target -> submit -> poll -> resolve.
    """

    def __init__(
        self,
        *,
        store: BaseArtifactStore,
        issuer: BaseSignedUrlIssuer,
        client: AnalysisClient,
        poller: JobPoller,
        resolver: ResultResolver,
        previewer: DocumentPreviewer,
        policy: UploadPolicy | None = None,
        closers: Sequence[Callable[[], Awaitable[None]]] = (),
    ) -> None:
        super().__init__(policy or UploadPolicy())
        self._store = store
        self._issuer = issuer
        self._client = client
        self._poller = poller
        self._resolver = resolver
        self._previewer = previewer
        self._closers = list(closers)

    async def redact(self, stream: BinaryIO, file_name: str) -> RedactionResult:
        """Run one document through the provider and return the redacted artifact.

        Raises:
            InvalidDocumentError: if the upload fails validation.
            JobFailedError: if the job ends failed or cancelled.
            CredentialError, StorageError, AnalysisError: from the pipeline steps.
        """
        extension = self._validate(stream, file_name)
        Log.info("Starting native document PII redaction", file=file_name)
        try:
            # Step 1: Upload source and issue signed URLs
            source = await self._store.upload(stream, file_name)
            source_url = await self._issuer.issue(source, Permission.READ)
            target_url = await self._issuer.issue(
                self._store.target_container(),
                Permission.WRITE | Permission.LIST,
            )
            Log.info(
                "Generated signed URLs",
                source_length=len(source_url),
                target_length=len(target_url),
            )

            # Step 2: Submit
            job_id = await self._client.submit(source_url, target_url, file_name)

            # Step 3: Poll until terminal
            job = await self._poller.poll(job_id)
            Log.info("Job completed", job_id=job_id, status=job.status.value)
            if job.status is not JobStatus.SUCCEEDED:
                raise JobFailedError(job_id, job.status)

            # Step 4: Resolve the artifact
            original_text = await asyncio.to_thread(
                self._read_original_text, stream, extension
            )
            result = await self._resolver.resolve(job, file_name, original_text)
        except Exception:
            Log.error("Error during native document PII redaction", exc_info=True, file=file_name)
            raise

        Log.info(
            "Redacted document downloaded successfully",
            file=file_name,
            size=result.file_size_bytes,
            entities=len(result.detected_entities),
        )
        return result

    def _read_original_text(self, stream: BinaryIO, extension: str) -> str:
        stream.seek(0)
        return self._previewer.original_text(stream.read(), extension)

    async def close(self) -> None:
        """Close every client, then re-raise the first failure."""
        errors: list[Exception] = []
        for closer in self._closers:
            try:
                await closer()
            except Exception as exc:
                Log.warning("Failed to close client", closer=closer, error=exc)
                errors.append(exc)
        if errors:
            raise errors[0]
