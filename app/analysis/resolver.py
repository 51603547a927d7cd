from pathlib import PurePosixPath
from urllib.parse import urlsplit

from app.analysis.exceptions import (
    ArtifactNotFoundError,
    InvariantViolationError,
    NoResultError,
)
from app.analysis.metadata import parse_entities
from app.analysis.models import AnalysisJob, DocumentLocation, JobStatus, ProcessedDocument
from app.extraction.preview import ORIGINAL_UNAVAILABLE, DocumentPreviewer
from app.logging.logger import Log
from app.redaction.models import PiiEntity, RedactionResult
from app.storage.base import BaseArtifactStore

METADATA_SUFFIX = ".result.json"


def is_metadata_target(target: DocumentLocation) -> bool:
    """Result descriptors are recognised by suffix on the URL path only."""
    return urlsplit(target.location).path.lower().endswith(METADATA_SUFFIX)


def partition_targets(
    document: ProcessedDocument,
) -> tuple[DocumentLocation | None, DocumentLocation | None]:
    """Split targets into (primary artifact, metadata descriptor); first match wins."""
    primary = next((t for t in document.targets if not is_metadata_target(t)), None)
    metadata = next((t for t in document.targets if is_metadata_target(t)), None)
    return primary, metadata


class ResultResolver:
    """Turns a succeeded job into a downloaded artifact plus best-effort enrichment."""

    def __init__(self, store: BaseArtifactStore, previewer: DocumentPreviewer) -> None:
        self._store = store
        self._previewer = previewer

    async def resolve(
        self,
        job: AnalysisJob,
        original_file_name: str,
        original_text: str | None = None,
    ) -> RedactionResult:
        """Download the primary artifact of a succeeded job.

        Raises:
            InvariantViolationError: if the job did not succeed.
            NoResultError: if there is no processed document or it has no targets.
            ArtifactNotFoundError: if every target is a metadata descriptor.
            ObjectNotFoundError: if the artifact blob is missing.
        """
        if job.status is not JobStatus.SUCCEEDED:
            raise InvariantViolationError(
                f"Cannot resolve job {job.job_id} with status {job.status.value}"
            )

        documents = job.processed_documents()
        if not documents or not documents[0].targets:
            raise NoResultError(f"No redacted document found in results of job {job.job_id}")
        primary, metadata = partition_targets(documents[0])
        if primary is None:
            raise ArtifactNotFoundError(
                f"Redacted document not found in targets of job {job.job_id}"
            )

        Log.info("Downloading redacted document", job_id=job.job_id, location=primary.location)
        data = await self._store.download_url(primary.location)
        extension = PurePosixPath(original_file_name).suffix.lower()

        entities = await self._load_entities(metadata) if metadata is not None else []
        return RedactionResult(
            original_file_name=original_file_name,
            file_extension=extension,
            original_text=original_text if original_text is not None else ORIGINAL_UNAVAILABLE,
            redacted_text=self._previewer.redacted_preview(data, extension),
            file_size_bytes=len(data),
            redacted_document_bytes=data,
            detected_entities=entities,
        )

    async def _load_entities(self, target: DocumentLocation) -> list[PiiEntity]:
        try:
            raw = await self._store.download_url(target.location)
            entities = parse_entities(raw)
        except Exception as exc:
            # Entity metadata is enrichment; the artifact is already in hand.
            Log.warning(
                "Failed to download or parse PII entities JSON",
                location=target.location,
                error=exc,
            )
            return []
        Log.debug("Parsed PII entities", count=len(entities))
        return entities
