"""Runtime. Bridges HTTP requests to the mock generation engine.

Each ``prepare_*`` function does the eager, per-request work (normalize,
classify, render, chunk, estimate usage) and returns a ``Turn``. Failures
there still surface as ordinary HTTP errors. ``stream_turn`` then lazily
emits the turn as Server-Sent Events.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from mockstream.catalog import Chooser, pick
from mockstream.engine.chunker import chunk_bounded, chunk_tokens
from mockstream.engine.classifier import classify, derive_subject
from mockstream.engine.emitter import DisconnectProbe, StreamVariant, emit
from mockstream.engine.normalizer import build_matching_input, extract_prompt
from mockstream.engine.tool_fences import Chunk, split_markdown
from mockstream.engine.usage import estimate
from mockstream.lorem import LoremParams, TextSource
from mockstream.schemas import DataMatchingEvent, LoremRequest, Message, StreamEvent, Usage
from mockstream.store import CollectionStore

logger = logging.getLogger(__name__)

NO_MATCH_TEXT = "No matching mock interaction found."
DONE_FRAME = "data: [DONE]\n\n"


class TurnRejected(ValueError):
    """The request is well-formed but cannot be answered (maps to HTTP 400)."""


@dataclass
class Turn:
    """Everything needed to emit one response; request-local."""

    prompt: str
    text: str
    chunks: list[Chunk]
    usage: Usage
    metadata: dict[str, Any] = field(default_factory=dict)
    preface: list[StreamEvent] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Turn preparation
# ---------------------------------------------------------------------------


def prepare_demo_turn(
    messages: Sequence[Message], choose: Chooser, max_chunk_length: int
) -> Turn:
    """Classify the last user prompt and answer it from the template catalog."""
    prompt = extract_prompt(messages)
    if prompt is None:
        raise TurnRejected("No user message found")

    category = classify(prompt)
    subject = derive_subject(prompt)
    text = pick(category, subject, choose)
    chunks = chunk_bounded(text, max_chunk_length)

    logger.info(
        f"Demo turn: category={category}, subject_len={len(subject)}, "
        f"chunks={len(chunks)}"
    )
    return Turn(
        prompt=prompt,
        text=text,
        chunks=chunks,
        usage=estimate(prompt, text),
        metadata={"category": category, "subject": subject},
    )


def prepare_collection_turn(
    messages: Sequence[Message],
    store: CollectionStore,
    collection_id: str,
    max_chunk_length: int,
) -> Turn:
    """Answer from a canned interaction; a miss yields a fixed fallback reply.

    A match is announced with a ``data-matching`` event, and tool fences in
    the canned output are replayed as tool events. The caller must check
    that ``collection_id`` exists.
    """
    matching_input = build_matching_input(messages)
    if not matching_input:
        raise TurnRejected("Messages must include content")

    match = store.lookup(collection_id, matching_input)
    if match is None:
        return Turn(
            prompt=matching_input,
            text=NO_MATCH_TEXT,
            chunks=chunk_bounded(NO_MATCH_TEXT, max_chunk_length),
            usage=estimate(matching_input, NO_MATCH_TEXT),
            metadata={"collectionId": collection_id, "matched": False},
        )

    collection = store.get(match.collection_id)
    interaction = match.interaction
    similarity = round(match.similarity, 4)
    metadata: dict[str, Any] = {
        "collectionId": match.collection_id,
        "matched": True,
        "interactionId": interaction.id,
        "similarity": similarity,
    }
    matching: dict[str, Any] = {
        "collection": collection.name or collection.id,
        "interactionId": interaction.id,
        "similarity": similarity,
    }
    if interaction.title:
        metadata["title"] = matching["title"] = interaction.title

    return Turn(
        prompt=matching_input,
        text=interaction.output,
        chunks=split_markdown(interaction.output, partial(chunk_bounded, max_length=max_chunk_length)),
        usage=estimate(matching_input, interaction.output),
        metadata=metadata,
        preface=[DataMatchingEvent(data=matching)],
    )


def lorem_params(request: LoremRequest) -> LoremParams:
    return LoremParams(
        count=request.count,
        paragraph_lower_bound=request.paragraph_lower_bound,
        paragraph_upper_bound=request.paragraph_upper_bound,
        sentence_lower_bound=request.sentence_lower_bound,
        sentence_upper_bound=request.sentence_upper_bound,
        suffix=request.suffix,
        units=request.units,
        words=tuple(request.words) if request.words else None,
    )


def prepare_lorem_turn(request: LoremRequest, source: TextSource) -> Turn:
    """Generate filler text and split it losslessly, one token per chunk."""
    prompt = extract_prompt(request.messages or []) or ""
    text = source.generate(lorem_params(request))
    chunks = chunk_tokens(text)
    logger.info(f"Lorem turn: units={request.units}, count={request.count}, chunks={len(chunks)}")
    return Turn(
        prompt=prompt,
        text=text,
        chunks=chunks,
        usage=estimate(prompt, text),
        metadata={"units": request.units, "count": request.count},
    )


def prepare_markdown_turn(markdown: str) -> Turn:
    """Stream caller-supplied markdown back verbatim (trimmed).

    ```tool fences become tool events; everything else is one chunk per token.
    """
    text = markdown.strip()
    if not text:
        raise TurnRejected("Markdown content is empty")
    chunks = split_markdown(text)
    logger.info(f"Markdown turn: chunks={len(chunks)}")
    return Turn(prompt="", text=text, chunks=chunks, usage=estimate("", text))


# ---------------------------------------------------------------------------
# SSE transport
# ---------------------------------------------------------------------------


def encode_sse(event: StreamEvent) -> str:
    """Serialize one event as an SSE ``data:`` frame."""
    payload = event.model_dump(by_alias=True, exclude_none=True, mode="json")
    return f"data: {json.dumps(payload)}\n\n"


async def stream_turn(
    turn: Turn,
    variant: StreamVariant,
    delay: float = 0.0,
    is_disconnected: DisconnectProbe | None = None,
) -> AsyncGenerator[str, None]:
    """Yield SSE frames for a turn, closing with ``[DONE]`` after ``finish``."""
    finished = False
    delivered = 0
    try:
        async for event in emit(
            turn.chunks,
            turn.usage,
            turn.metadata,
            preface=turn.preface,
            variant=variant,
            delay=delay,
            is_disconnected=is_disconnected,
        ):
            if event.type in ("text-delta", "tool-input-available"):
                delivered += 1
            elif event.type == "finish":
                finished = True
            yield encode_sse(event)
        if finished:
            yield DONE_FRAME
    finally:
        if finished:
            logger.info(f"Stream complete: chunks={delivered}")
        else:
            logger.info(f"Stream abandoned: chunks={delivered}/{len(turn.chunks)}")
