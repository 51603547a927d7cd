"""Entity extraction from the provider's result-descriptor JSON.

The descriptor layout is not part of the job contract, so parsing is
structural: every list found under an ``entities`` key is read, and entries
missing a type, a value or an offset are skipped.
"""

import json
from typing import Any

from app.redaction.models import PiiEntity

_MAX_DEPTH = 8


def parse_entities(raw: bytes | str) -> list[PiiEntity]:
    """Parse PII entities out of a result-descriptor document.

    Raises:
        ValueError: if *raw* is not valid JSON.
    """
    data = json.loads(raw)
    entities: list[PiiEntity] = []
    _collect(data, entities, depth=0)
    return entities


def _collect(node: Any, out: list[PiiEntity], depth: int) -> None:
    if depth > _MAX_DEPTH:
        return
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "entities" and isinstance(value, list):
                out.extend(e for e in (_to_entity(item) for item in value) if e is not None)
            else:
                _collect(value, out, depth + 1)
    elif isinstance(node, list):
        for item in node:
            _collect(item, out, depth + 1)


def _to_entity(raw: Any) -> PiiEntity | None:
    if not isinstance(raw, dict):
        return None
    entity_type = raw.get("category") or raw.get("type")
    value = raw.get("text") if "text" in raw else raw.get("value")
    if not isinstance(entity_type, str) or not isinstance(value, str):
        return None

    if isinstance(raw.get("offset"), int):
        start = raw["offset"]
        length = raw.get("length")
        end = start + (length if isinstance(length, int) else len(value))
    elif isinstance(raw.get("startIndex"), int):
        start = raw["startIndex"]
        end = raw["endIndex"] if isinstance(raw.get("endIndex"), int) else start + len(value)
    else:
        return None
    return PiiEntity(type=entity_type, value=value, start_index=start, end_index=end)
