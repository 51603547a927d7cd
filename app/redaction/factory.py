import httpx

from app.analysis.client import AnalysisClient
from app.analysis.poller import JobPoller
from app.analysis.resolver import ResultResolver
from app.auth.factory import CredentialFactory
from app.config.settings import Settings
from app.extraction.factory import TextExtractorFactory
from app.extraction.preview import DocumentPreviewer
from app.logging.logger import Log
from app.redaction.base import BaseDocumentRedactor
from app.redaction.native_redactor import NativeDocumentRedactor
from app.redaction.text_document_redactor import TextDocumentRedactor
from app.redaction.validation import UploadPolicy
from app.storage.factory import StorageFactory
from app.text_redaction.factory import TextRedactorFactory


class RedactorFactory:
    """Creates the configured document redactor with all of its clients."""

    MODES = ("native", "text")

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentRedactor:
        mode = settings.redaction_mode.lower()
        if mode not in cls.MODES:
            raise ValueError(f"Unknown redaction mode '{mode}'. Choose from: {list(cls.MODES)}")
        if mode == "native" and not settings.analysis_endpoint:
            Log.warning("analysis_endpoint is not configured, falling back to text redaction")
            mode = "text"
        if mode == "text":
            return cls._create_text(settings)
        return cls._create_native(settings)

    @classmethod
    def _create_text(cls, settings: Settings) -> TextDocumentRedactor:
        return TextDocumentRedactor(
            text_redactor=TextRedactorFactory.create(settings),
            extractors=TextExtractorFactory.create_registry(settings),
            policy=UploadPolicy.from_settings(settings),
        )

    @classmethod
    def _create_native(cls, settings: Settings) -> NativeDocumentRedactor:
        credential = CredentialFactory.create_credential(settings)
        # Config errors surface here, before any client holding connections exists.
        auth = CredentialFactory.create_provider_auth(settings, credential)
        store, issuer = StorageFactory.create(settings, credential)
        http_client = httpx.AsyncClient(timeout=settings.analysis_timeout_seconds)
        client = AnalysisClient(
            http_client=http_client,
            endpoint=settings.analysis_endpoint,
            auth=auth,
            api_version=settings.analysis_api_version,
            language=settings.analysis_language,
            document_id=settings.analysis_document_id,
            task_name=settings.analysis_task_name,
            redaction_policy=settings.analysis_redaction_policy,
            exclude_extraction_data=settings.analysis_exclude_extraction_data,
        )
        poller = JobPoller(
            client,
            interval_seconds=settings.job_poll_interval_seconds,
            max_attempts=settings.max_poll_attempts,
        )
        previewer = DocumentPreviewer(TextExtractorFactory.create_registry(settings))
        closers = [store.close, http_client.aclose]
        if credential is not None:
            closers.append(credential.close)
        return NativeDocumentRedactor(
            store=store,
            issuer=issuer,
            client=client,
            poller=poller,
            resolver=ResultResolver(store, previewer),
            previewer=previewer,
            policy=UploadPolicy.from_settings(settings),
            closers=closers,
        )
