"""Fixed-pattern PII detection used when no AI answer is usable."""

import re
from typing import ClassVar

from app.redaction.models import PiiEntity
from app.text_redaction.models import TextRedactionResult


class PatternDetector:
    """Regex detector: naive, deterministic, no external calls."""

    EMAIL_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"
    )
    PHONE_RE: ClassVar[re.Pattern[str]] = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")
    SSN_RE: ClassVar[re.Pattern[str]] = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")
    CREDIT_CARD_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"
    )
    ZIP_CODE_RE: ClassVar[re.Pattern[str]] = re.compile(r"\b\d{5}(?:-\d{4})?\b")

    BASIC_RULES: ClassVar[list[tuple[str, re.Pattern[str]]]] = [
        ("EMAIL", EMAIL_RE),
        ("PHONE", PHONE_RE),
    ]
    EXTENDED_RULES: ClassVar[list[tuple[str, re.Pattern[str]]]] = [
        *BASIC_RULES,
        ("SSN", SSN_RE),
        ("CREDIT_CARD", CREDIT_CARD_RE),
        ("ZIP_CODE", ZIP_CODE_RE),
    ]

    def __init__(self, rules: list[tuple[str, re.Pattern[str]]] | None = None) -> None:
        self._rules = rules if rules is not None else self.BASIC_RULES

    def detect(self, text: str) -> list[PiiEntity]:
        """Non-overlapping matches in text order; on overlap the earlier, longer span wins."""
        matches = [
            PiiEntity(type=entity_type, value=m.group(), start_index=m.start(), end_index=m.end())
            for entity_type, pattern in self._rules
            for m in pattern.finditer(text)
        ]
        matches.sort(key=lambda e: (e.start_index, -e.end_index))

        entities: list[PiiEntity] = []
        for entity in matches:
            if entities and entity.start_index < entities[-1].end_index:
                continue
            entities.append(entity)
        return entities

    def redact(self, text: str) -> TextRedactionResult:
        """Replace every detected span with ``[REDACTED-<TYPE>]``."""
        entities = self.detect(text)
        redacted = text
        for entity in reversed(entities):
            redacted = (
                redacted[: entity.start_index]
                + f"[REDACTED-{entity.type}]"
                + redacted[entity.end_index :]
            )
        return TextRedactionResult(original_text=text, redacted_text=redacted, entities=entities)
