from dataclasses import dataclass, field

from app.redaction.models import PiiEntity


@dataclass
class TextRedactionResult:
    """Output of in-process text redaction; entity offsets index into ``original_text``."""

    original_text: str
    redacted_text: str
    entities: list[PiiEntity] = field(default_factory=list)
