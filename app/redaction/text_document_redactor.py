import asyncio
from typing import BinaryIO

from app.extraction.base import BaseTextExtractor
from app.logging.logger import Log
from app.redaction.base import BaseDocumentRedactor
from app.redaction.exceptions import InvalidDocumentError
from app.redaction.models import RedactionResult
from app.redaction.validation import UploadPolicy
from app.text_redaction.redactor import TextRedactor


class TextDocumentRedactor(BaseDocumentRedactor):
    """Degraded mode: extract text in-process and redact it without the provider.

    The artifact is the redacted plain text, not a re-rendered document.
    """

    def __init__(
        self,
        *,
        text_redactor: TextRedactor,
        extractors: dict[str, BaseTextExtractor],
        policy: UploadPolicy | None = None,
    ) -> None:
        super().__init__(policy or UploadPolicy())
        self._text_redactor = text_redactor
        self._extractors = extractors

    async def redact(self, stream: BinaryIO, file_name: str) -> RedactionResult:
        extension = self._validate(stream, file_name)
        extractor = self._extractors.get(extension)
        if extractor is None:
            raise InvalidDocumentError(f"No text extractor for '{extension}'")

        Log.info("Starting text-mode PII redaction", file=file_name)
        data = stream.read()
        text = await asyncio.to_thread(extractor.extract, data)
        if not text.strip():
            raise InvalidDocumentError("The uploaded file is empty or could not be read.")

        redaction = await self._text_redactor.redact(text)
        redacted_bytes = redaction.redacted_text.encode("utf-8")
        Log.info(
            "Redaction completed",
            file=file_name,
            entities=len(redaction.entities),
        )
        return RedactionResult(
            original_file_name=file_name,
            file_extension=extension,
            original_text=redaction.original_text,
            redacted_text=redaction.redacted_text,
            file_size_bytes=len(redacted_bytes),
            redacted_document_bytes=redacted_bytes,
            detected_entities=redaction.entities,
        )
