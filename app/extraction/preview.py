from app.extraction.base import BaseTextExtractor
from app.extraction.exceptions import ExtractionError
from app.logging.logger import Log

ORIGINAL_UNAVAILABLE = "(Original document - view not available for native document processing)"


class DocumentPreviewer:
    """Best-effort human-readable text for documents that travel as binaries."""

    def __init__(self, extractors: dict[str, BaseTextExtractor]) -> None:
        self._extractors = {ext.lower(): extractor for ext, extractor in extractors.items()}

    def original_text(self, data: bytes, extension: str) -> str:
        """Extracted text of the source document, or a placeholder if that fails."""
        extractor = self._extractors.get(extension.lower())
        if extractor is None:
            return ORIGINAL_UNAVAILABLE
        try:
            return extractor.extract(data)
        except ExtractionError as exc:
            Log.warning("Original text preview unavailable", extension=extension, error=exc)
            return ORIGINAL_UNAVAILABLE

    @staticmethod
    def redacted_preview(data: bytes, extension: str) -> str:
        """Plain text is shown as-is; anything else gets a size/type summary."""
        if extension.lower() == ".txt":
            return data.decode("utf-8", errors="replace")
        return (
            f"Binary document redacted successfully. File type: {extension}\n\n"
            "Download the redacted document to view the content.\n"
            f"Size: {len(data):,} bytes"
        )
