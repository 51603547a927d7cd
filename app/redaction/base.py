from abc import ABC, abstractmethod
from typing import BinaryIO

from app.redaction.models import RedactionResult
from app.redaction.validation import UploadPolicy, stream_size


class BaseDocumentRedactor(ABC):
    """Contract for all document redaction strategies."""

    def __init__(self, policy: UploadPolicy) -> None:
        self._policy = policy

    @abstractmethod
    async def redact(self, stream: BinaryIO, file_name: str) -> RedactionResult:
        """Redact PII from the document in *stream*.

        Args:
            stream: Seekable binary stream with the document content.
            file_name: Original file name; its extension selects the handling.

        Raises:
            InvalidDocumentError: if the upload fails validation.
        """

    def _validate(self, stream: BinaryIO, file_name: str) -> str:
        return self._policy.check(file_name, stream_size(stream))

    async def close(self) -> None:
        """Release clients held by the redactor."""

    async def __aenter__(self) -> "BaseDocumentRedactor":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
