"""Stream emitter: turns chunks into the canonical ordered event sequence.

    start? -> preface* -> text-start -> (text-delta | tool-*)* -> text-end -> finish

The emitter is a cold async generator: nothing is produced until the
consumer asks for it, and a finished (or abandoned) generator cannot be
replayed. Pacing happens between deltas with ``asyncio.sleep`` so other
requests keep running while one stream waits.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

from mockstream.engine.tool_fences import Chunk, ToolCall
from mockstream.schemas import (
    FinishEvent,
    StartEvent,
    StreamEvent,
    TextDeltaEvent,
    TextEndEvent,
    TextStartEvent,
    Usage,
)

logger = logging.getLogger(__name__)

DEFAULT_TURN_ID = "text-1"

DisconnectProbe = Callable[[], Awaitable[bool]]


class StreamVariant(BaseModel):
    """Wire flavour of a stream.

    include_start: emit the leading ``start`` event
    namespace:     when set, usage and metadata are reported under
                    ``messageMetadata[namespace]`` instead of top-level usage
    """

    model_config = ConfigDict(frozen=True)

    include_start: bool = True
    namespace: str | None = "mockstream"


NAMESPACED = StreamVariant(include_start=True, namespace="mockstream")
PLAIN = StreamVariant(include_start=False, namespace=None)


def build_finish(usage: Usage, metadata: dict[str, Any], variant: StreamVariant) -> FinishEvent:
    """Shape the terminal event for the given variant."""
    if variant.namespace:
        payload = {"usage": usage.model_dump(by_alias=True), **metadata}
        return FinishEvent(message_metadata={variant.namespace: payload})
    return FinishEvent(usage=usage, message_metadata=dict(metadata) or None)


async def emit(
    chunks: Sequence[Chunk],
    usage: Usage,
    metadata: dict[str, Any] | None = None,
    *,
    preface: Sequence[StreamEvent] = (),
    variant: StreamVariant = NAMESPACED,
    turn_id: str = DEFAULT_TURN_ID,
    message_id: str | None = None,
    delay: float = 0.0,
    is_disconnected: DisconnectProbe | None = None,
) -> AsyncGenerator[StreamEvent, None]:
    """Yield the events for one response turn.

    ``preface`` events follow ``start``. A ``ToolCall`` chunk yields its tool
    events in place of a delta.

    ``is_disconnected`` is awaited before every chunk and before the closing
    events; once it reports True the stream stops without ``finish``.
    Cancellation of the surrounding task surfaces at the pacing sleep and
    propagates.
    """

    async def gone() -> bool:
        return is_disconnected is not None and await is_disconnected()

    if variant.include_start:
        yield StartEvent(message_id=message_id or str(uuid.uuid4()))
    for event in preface:
        yield event
    yield TextStartEvent(id=turn_id)

    for index, chunk in enumerate(chunks):
        if index and delay > 0:
            await asyncio.sleep(delay)
        if await gone():
            logger.info(f"Consumer disconnected after {index} chunks, stopping turn {turn_id}")
            return
        if isinstance(chunk, ToolCall):
            for event in chunk.events():
                yield event
        else:
            yield TextDeltaEvent(id=turn_id, delta=chunk)

    if await gone():
        logger.info(f"Consumer disconnected before text-end, stopping turn {turn_id}")
        return
    yield TextEndEvent(id=turn_id)

    if await gone():
        logger.info(f"Consumer disconnected before finish, stopping turn {turn_id}")
        return
    yield build_finish(usage, metadata or {}, variant)
