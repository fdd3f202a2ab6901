"""Translate A2A message parts into the plain role/content shape agents consume."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Union

from .models import DataPart, InboundMessage, TextPart, UnknownPart, parse_part


def part_to_text(part: Union[TextPart, DataPart, UnknownPart]) -> str:
    if isinstance(part, TextPart):
        return part.text
    if isinstance(part, DataPart):
        # A data part with no payload at all contributes nothing, like an unknown kind
        if "data" not in part.model_fields_set:
            return ""
        return json.dumps(part.data, ensure_ascii=False, separators=(",", ":"))
    return ""


def parts_to_content(parts: Iterable[Any]) -> str:
    return "\n".join(part_to_text(parse_part(raw)) for raw in parts)


def to_agent_message(message: InboundMessage) -> Dict[str, str]:
    return {"role": message.role, "content": parts_to_content(message.parts)}
