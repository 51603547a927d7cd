import os
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import BinaryIO

from app.config.settings import Settings
from app.redaction.exceptions import InvalidDocumentError


def stream_size(stream: BinaryIO) -> int:
    """Size of a seekable stream; leaves the position at zero."""
    size = stream.seek(0, os.SEEK_END)
    stream.seek(0)
    return size


@dataclass(frozen=True)
class UploadPolicy:
    """Limits an incoming document must satisfy before any network call."""

    max_bytes: int = 10 * 1024 * 1024
    extensions: frozenset[str] = frozenset({".pdf", ".docx", ".txt"})

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadPolicy":
        return cls(
            max_bytes=settings.max_upload_bytes,
            extensions=settings.supported_extension_set,
        )

    def check(self, file_name: str, size: int) -> str:
        """Validate an upload and return its lowercase extension.

        Raises:
            InvalidDocumentError: on an empty, oversized or unsupported file.
        """
        if size <= 0:
            raise InvalidDocumentError("The uploaded file is empty.")
        if size > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise InvalidDocumentError(f"File size exceeds {limit_mb:g}MB limit.")
        extension = PurePosixPath(file_name).suffix.lower()
        if extension not in self.extensions:
            raise InvalidDocumentError(
                f"Unsupported file type '{extension or file_name}'. "
                f"Supported: {', '.join(sorted(self.extensions))}"
            )
        return extension
