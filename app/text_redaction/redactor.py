"""AI-powered text redaction with a fixed-pattern fallback."""

import json
from pathlib import Path
from typing import Any

from app.logging.logger import Log
from app.redaction.models import PiiEntity
from app.text_redaction.client_base import BaseChatClient
from app.text_redaction.exceptions import TextRedactionResponseError
from app.text_redaction.models import TextRedactionResult
from app.text_redaction.pattern_detector import PatternDetector
from app.text_redaction.prompt_loader import build_user_prompt, load_system_prompt


class TextRedactor:
    """Redacts PII in plain text using a chat-completion provider."""

    def __init__(
        self,
        *,
        client: BaseChatClient,
        model: str,
        temperature: float = 0.0,
        prompt_path: Path | None = None,
        fallback: PatternDetector | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = load_system_prompt(prompt_path)
        self._fallback = fallback or PatternDetector()

    async def redact(self, text: str) -> TextRedactionResult:
        """Redact *text*; an unusable AI answer degrades to pattern matching.

        Raises:
            TextRedactionNetworkError: if the provider cannot be reached.
        """
        if not text.strip():
            return TextRedactionResult(original_text=text, redacted_text=text)

        Log.info("Starting PII redaction", length=len(text))
        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=build_user_prompt(text),
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        try:
            result = self._build_result(text, self._parse_json(raw_response))
        except TextRedactionResponseError as exc:
            Log.warning("Failed to parse AI response, using fallback", error=exc)
            result = self._fallback.redact(text)

        Log.info("Redacted PII", entities=len(result.entities))
        return result

    @staticmethod
    def _parse_json(raw: str) -> dict[str, Any]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise TextRedactionResponseError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise TextRedactionResponseError("JSON response must be an object")
        return {str(key).lower(): value for key, value in parsed.items()}

    @staticmethod
    def _build_result(text: str, data: dict[str, Any]) -> TextRedactionResult:
        redacted = data.get("redactedtext")
        if redacted is not None and not isinstance(redacted, str):
            raise TextRedactionResponseError("'redactedText' must be a string")

        raw_entities = data.get("entities") or []
        if not isinstance(raw_entities, list):
            raise TextRedactionResponseError("'entities' must be a list")

        entities: list[PiiEntity] = []
        for item in raw_entities:
            if not isinstance(item, dict):
                continue
            fields = {str(key).lower(): value for key, value in item.items()}
            entities.append(
                PiiEntity(
                    type=str(fields.get("type") or "UNKNOWN"),
                    value=str(fields.get("value") or ""),
                    start_index=_as_int(fields.get("startindex")),
                    end_index=_as_int(fields.get("endindex")),
                )
            )
        return TextRedactionResult(
            original_text=text,
            redacted_text=redacted if redacted is not None else text,
            entities=entities,
        )


def _as_int(value: object) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0
