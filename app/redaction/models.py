from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class PiiEntity:
    """A detected PII span; offsets index into the text it was detected in."""

    type: str
    value: str
    start_index: int
    end_index: int


@dataclass
class RedactionResult:
    """Final output of one redaction request.

    ``redacted_document_bytes`` belongs to the caller once returned; nothing
    else keeps a reference to it.
    """

    original_file_name: str
    file_extension: str
    original_text: str
    redacted_text: str
    file_size_bytes: int
    redacted_document_bytes: bytes
    detected_entities: list[PiiEntity] = field(default_factory=list)
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
