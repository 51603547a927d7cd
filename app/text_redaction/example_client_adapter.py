"""Offline chat client for development and tests.

Answers every prompt the way a well-behaved model would, using fixed
patterns instead of a model. Also a template for new provider adapters:
implement BaseChatClient and register the provider in TextRedactorFactory.
"""

import json
from dataclasses import asdict

from app.text_redaction.client_base import BaseChatClient
from app.text_redaction.pattern_detector import PatternDetector
from app.text_redaction.prompt_loader import TEXT_MARKER


class ExampleClientAdapter(BaseChatClient):
    """No network calls; detects emails, phones, SSNs and card numbers."""

    def __init__(self) -> None:
        self._detector = PatternDetector(PatternDetector.EXTENDED_RULES)

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, system_prompt
        _, marker, rest = user_prompt.partition(TEXT_MARKER)
        text = rest if marker else user_prompt
        if not text:
            return "{}"
        result = self._detector.redact(text)
        return json.dumps(
            {
                "redactedText": result.redacted_text,
                "entities": [
                    {
                        "type": entity["type"],
                        "value": entity["value"],
                        "startIndex": entity["start_index"],
                        "endIndex": entity["end_index"],
                    }
                    for entity in map(asdict, result.entities)
                ],
            }
        )
