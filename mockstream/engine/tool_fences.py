"""Tool fences: fenced ```tool blocks inside markdown become tool-call events.

    ```tool search id=call-1
    {"input": {"query": "weather"}, "output": {"temp": 21}}
    ```

The info string may name the tool and call id positionally or as
``name=``/``id=`` pairs; otherwise they are read from the body. The body is
parsed as YAML, so plain JSON works too. A fence that does not parse to a
mapping is streamed as ordinary text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import yaml

from mockstream.engine.chunker import chunk_tokens
from mockstream.schemas import (
    StreamEvent,
    ToolInputAvailableEvent,
    ToolOutputAvailableEvent,
    ToolOutputErrorEvent,
)

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```tool[^\n]*\n[\s\S]*?```", re.IGNORECASE)
_FENCE_OPENER = re.compile(r"^```tool", re.IGNORECASE)

NAME_KEYS = ("name", "tool", "toolname")
ID_KEYS = ("id", "toolcallid", "call", "callid")

ERROR_STATES = ("output-error", "output-denied")
DEFAULT_ERROR_TEXT = "An unknown tool error occurred."


@dataclass(frozen=True)
class ToolCall:
    """One tool invocation replayed in the stream."""

    tool_call_id: str
    tool_name: str
    input: Any = None
    output: Any = None
    has_output: bool = False
    state: str | None = None
    error_text: str | None = None

    def events(self) -> list[StreamEvent]:
        """Input event, then an output or error event when the block has one."""
        events: list[StreamEvent] = [
            ToolInputAvailableEvent(
                tool_call_id=self.tool_call_id,
                tool_name=self.tool_name,
                input=self.input if self.input is not None else {},
            )
        ]
        if self.state in ERROR_STATES or self.error_text:
            events.append(
                ToolOutputErrorEvent(
                    tool_call_id=self.tool_call_id,
                    error_text=self.error_text or DEFAULT_ERROR_TEXT,
                )
            )
        elif self.state == "output-available" or self.has_output:
            events.append(
                ToolOutputAvailableEvent(
                    tool_call_id=self.tool_call_id,
                    output=self.output if self.output is not None else {},
                )
            )
        return events


Chunk = str | ToolCall


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def parse_fence_info(info: str) -> tuple[str | None, str | None]:
    """Read ``(tool_name, tool_call_id)`` from the text after ```tool."""
    name: str | None = None
    call_id: str | None = None
    for token in info.split():
        if "=" in token:
            key, _, raw = token.partition("=")
            value = _unquote(raw.strip())
            if not value:
                continue
            key = key.lower()
            if key in NAME_KEYS and name is None:
                name = value
            elif key in ID_KEYS and call_id is None:
                call_id = value
        elif name is None:
            name = token
        elif call_id is None:
            call_id = token
    return name, call_id


def _string_field(data: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def parse_tool_fence(block: str, fallback_id: str) -> ToolCall | None:
    """Parse one fenced block, or return None if it is not a usable tool call."""
    header, _, body = block.partition("\n")
    name, call_id = parse_fence_info(_FENCE_OPENER.sub("", header))

    lines = body.split("\n")
    while lines and lines[-1].strip() == "```":
        lines.pop()
    content = "\n".join(lines).strip()

    try:
        data = yaml.safe_load(content) if content else {}
    except yaml.YAMLError as e:
        logger.warning(f"Could not parse tool fence {fallback_id}: {e}")
        return None
    if not isinstance(data, dict):
        return None

    state = data.get("state")
    return ToolCall(
        tool_call_id=call_id
        or _string_field(data, "toolCallId", "tool_call_id", "callId", "id", "toolCall")
        or fallback_id,
        tool_name=name or _string_field(data, "toolName", "tool_name", "name", "tool") or "tool",
        input=data.get("input"),
        output=data.get("output"),
        has_output="output" in data,
        state=state if isinstance(state, str) else None,
        error_text=_string_field(data, "errorText", "error_text", "error"),
    )


def split_markdown(
    markdown: str, chunk_text: Callable[[str], list[str]] = chunk_tokens
) -> list[Chunk]:
    """Chunk markdown, replacing each parseable tool fence with a ToolCall.

    Text between fences (and any fence that fails to parse) goes through
    ``chunk_text``. Fallback call ids are numbered by fence position.
    """
    chunks: list[Chunk] = []
    position = 0
    for number, fence in enumerate(_FENCE.finditer(markdown), start=1):
        chunks.extend(chunk_text(markdown[position : fence.start()]))
        call = parse_tool_fence(fence.group(0), f"tool-call-{number}")
        if call is None:
            chunks.extend(chunk_text(fence.group(0)))
        else:
            chunks.append(call)
        position = fence.end()
    chunks.extend(chunk_text(markdown[position:]))
    return chunks
