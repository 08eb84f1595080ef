"""Request/response models: the contract between the mock service and clients.

Wire format is camelCase JSON; Python attributes are snake_case.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for everything that crosses the HTTP boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


class ContentPart(WireModel):
    """One element of a structured message body, e.g. {"type": "text", "text": "hi"}."""

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str
    text: str | None = None
    data: Any = None


class Message(WireModel):
    """A single chat message. Immutable once received."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant", "tool"]
    content: str | list[str | ContentPart] | dict[str, Any] | None = None
    parts: list[ContentPart] | None = None
    name: str | None = None
    tool_call_id: str | None = None


class LlmRequest(WireModel):
    """Body of /api/llm and /api/chat/{collection_id}."""

    messages: list[Message] = Field(min_length=1)


class LoremRequest(WireModel):
    """Body of /api/lorem. Every field has a default so `{}` is valid."""

    messages: list[Message] | None = None
    count: int = Field(default=1, ge=1)
    paragraph_lower_bound: int = Field(default=3, ge=1)
    paragraph_upper_bound: int = Field(default=7, ge=1)
    sentence_lower_bound: int = Field(default=5, ge=1)
    sentence_upper_bound: int = Field(default=15, ge=1)
    suffix: str = "\n"
    units: Literal["words", "sentences", "paragraphs"] = "sentences"
    words: list[str] | None = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def bounds_are_ordered(self) -> LoremRequest:
        if self.paragraph_lower_bound > self.paragraph_upper_bound:
            raise ValueError("paragraphLowerBound must not exceed paragraphUpperBound")
        if self.sentence_lower_bound > self.sentence_upper_bound:
            raise ValueError("sentenceLowerBound must not exceed sentenceUpperBound")
        return self


class MarkdownRequest(WireModel):
    """Body of /api/markdown: literal markdown to stream back."""

    markdown: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Outbound stream events
# ---------------------------------------------------------------------------


class Usage(WireModel):
    """Approximate token accounting attached to the terminal event."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class StartEvent(WireModel):
    type: Literal["start"] = "start"
    message_id: str


class TextStartEvent(WireModel):
    type: Literal["text-start"] = "text-start"
    id: str


class TextDeltaEvent(WireModel):
    type: Literal["text-delta"] = "text-delta"
    id: str
    delta: str


class TextEndEvent(WireModel):
    type: Literal["text-end"] = "text-end"
    id: str


class DataMatchingEvent(WireModel):
    """Which canned interaction answered the request; sent right after start."""

    type: Literal["data-matching"] = "data-matching"
    id: str = "matching"
    data: dict[str, Any]


class ToolInputAvailableEvent(WireModel):
    type: Literal["tool-input-available"] = "tool-input-available"
    tool_call_id: str
    tool_name: str
    input: Any = None


class ToolOutputAvailableEvent(WireModel):
    type: Literal["tool-output-available"] = "tool-output-available"
    tool_call_id: str
    output: Any = None


class ToolOutputErrorEvent(WireModel):
    type: Literal["tool-output-error"] = "tool-output-error"
    tool_call_id: str
    error_text: str


class FinishEvent(WireModel):
    """Terminal event.

    Plain streams carry `usage` at the top level; namespaced streams fold
    usage and metadata into `messageMetadata[<namespace>]`.
    """

    type: Literal["finish"] = "finish"
    finish_reason: Literal["stop"] = "stop"
    usage: Usage | None = None
    message_metadata: dict[str, Any] | None = None


StreamEvent = Annotated[
    Union[
        StartEvent,
        DataMatchingEvent,
        TextStartEvent,
        TextDeltaEvent,
        ToolInputAvailableEvent,
        ToolOutputAvailableEvent,
        ToolOutputErrorEvent,
        TextEndEvent,
        FinishEvent,
    ],
    Field(discriminator="type"),
]


class ErrorResponse(BaseModel):
    """JSON body of every non-2xx response."""

    error: str
    details: list[dict[str, Any]] | None = None
