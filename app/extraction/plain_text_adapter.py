from app.extraction.base import BaseTextExtractor
from app.extraction.exceptions import ExtractionError


class PlainTextAdapter(BaseTextExtractor):
    """Decodes UTF-8 text, dropping a leading byte-order mark."""

    def extract(self, data: bytes) -> str:
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ExtractionError(f"Text is not valid UTF-8: {exc}") from exc
