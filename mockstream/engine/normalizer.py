"""Text normalizer. Flattens message content into one plain string.

Clients send content as a plain string, a list of parts
(``[{"type": "text", "text": "..."}]``) or an arbitrary object. Every shape
degrades to text; nothing here raises.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from mockstream.schemas import Message

logger = logging.getLogger(__name__)


def _serialize(value: Any) -> str:
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True, exclude_none=True)
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return str(value)


def _field(value: Any, name: str) -> Any:
    """Read ``name`` from a mapping or a model, else None."""
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _flatten_part(part: Any) -> str:
    if isinstance(part, str):
        return part
    text = _field(part, "text")
    if isinstance(text, str):
        return text
    data = _field(part, "data")
    if isinstance(data, str):
        return data
    return _serialize(part)


def flatten_content(content: Any) -> str:
    """Normalize message content given as a string, a list of parts or an object."""
    match content:
        case None:
            return ""
        case str():
            return content
        case Mapping() | BaseModel():
            text = _field(content, "text")
            return text if isinstance(text, str) else _serialize(content)
        case Sequence():
            return " ".join(_flatten_part(part) for part in content)
        case _:
            return str(content)


def message_text(message: Message) -> str:
    """Text of one message.

    ``content`` wins; UI-style ``parts`` are used only when content is absent,
    and only their text parts count.
    """
    if message.content is None and message.parts:
        return "".join(
            p.text for p in message.parts if p.type == "text" and isinstance(p.text, str)
        )
    return flatten_content(message.content)


def extract_prompt(messages: Sequence[Message]) -> str | None:
    """Return the trimmed text of the last user message, or None if there is none."""
    for message in reversed(messages):
        if message.role == "user":
            return message_text(message).strip()
    return None


def build_matching_input(messages: Sequence[Message]) -> str:
    """Text used to match a request against canned interactions.

    All user turns joined by newlines; falls back to every message when the
    user turns carry no text.
    """
    user_text = "\n".join(message_text(m) for m in messages if m.role == "user").strip()
    if user_text:
        return user_text
    logger.debug("No user text for matching, falling back to all messages")
    return "\n".join(message_text(m) for m in messages).strip()
