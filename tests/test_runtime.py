import asyncio
import json

import pytest

from mockstream.config import CollectionConfig, InteractionConfig
from mockstream.engine.emitter import NAMESPACED, PLAIN
from mockstream.lorem import LoremSource
from mockstream.runtime import (
    DONE_FRAME,
    NO_MATCH_TEXT,
    TurnRejected,
    encode_sse,
    prepare_collection_turn,
    prepare_demo_turn,
    prepare_lorem_turn,
    prepare_markdown_turn,
    stream_turn,
)
from mockstream.schemas import LoremRequest, Message, TextStartEvent
from mockstream.store import CollectionStore


def user(text: str) -> Message:
    return Message(role="user", content=text)


async def frames(gen):
    return [frame async for frame in gen]


@pytest.fixture
def store():
    collection = CollectionConfig(
        id="faq",
        interactions=[
            InteractionConfig(id="hours", title="Hours", input="When are you open?", output="Nine to five."),
        ],
    )
    return CollectionStore([collection])


def test_demo_turn():
    turn = prepare_demo_turn([user("Who is Ada Lovelace?")], lambda n: 0, 60)
    assert turn.metadata == {"category": "person", "subject": "Ada Lovelace?"}
    assert "Ada Lovelace?" in turn.text
    assert "".join(turn.chunks).strip() == turn.text.strip()
    assert turn.usage.input_tokens == 5


def test_demo_turn_requires_user_message():
    with pytest.raises(TurnRejected, match="No user message found"):
        prepare_demo_turn([Message(role="assistant", content="hi")], lambda n: 0, 60)


def test_collection_turn_match(store):
    turn = prepare_collection_turn([user("when are you open?")], store, "faq", 60)
    assert turn.text == "Nine to five."
    assert turn.metadata == {
        "collectionId": "faq",
        "matched": True,
        "interactionId": "hours",
        "similarity": 1.0,
        "title": "Hours",
    }
    assert [e.type for e in turn.preface] == ["data-matching"]
    assert turn.preface[0].data == {
        "collection": "faq",
        "interactionId": "hours",
        "similarity": 1.0,
        "title": "Hours",
    }


def test_collection_turn_miss(store):
    turn = prepare_collection_turn([user("unrelated words")], store, "faq", 60)
    assert turn.text == NO_MATCH_TEXT
    assert turn.metadata == {"collectionId": "faq", "matched": False}
    assert turn.preface == []


def test_collection_turn_needs_content(store):
    with pytest.raises(TurnRejected):
        prepare_collection_turn([user("   ")], store, "faq", 60)


def test_lorem_turn_without_messages():
    request = LoremRequest(units="words", count=3, words=["ipsum"])
    turn = prepare_lorem_turn(request, LoremSource())
    assert turn.text == "ipsum ipsum ipsum"
    assert turn.chunks == ["ipsum", " ", "ipsum", " ", "ipsum"]
    assert turn.usage.input_tokens == 0
    assert turn.metadata == {"units": "words", "count": 3}


def test_markdown_turn():
    turn = prepare_markdown_turn("\n# Title\n\nBody  text\n")
    assert turn.text == "# Title\n\nBody  text"
    assert "".join(turn.chunks) == turn.text

    with pytest.raises(TurnRejected):
        prepare_markdown_turn(" \n ")


def test_encode_sse_omits_nulls():
    assert encode_sse(TextStartEvent(id="text-1")) == 'data: {"type": "text-start", "id": "text-1"}\n\n'


def test_stream_turn_ends_with_done():
    turn = prepare_markdown_turn("one two")
    out = asyncio.run(frames(stream_turn(turn, PLAIN)))
    assert out[-1] == DONE_FRAME
    finish = json.loads(out[-2][len("data: "):])
    assert finish["type"] == "finish"
    assert finish["usage"] == {"inputTokens": 0, "outputTokens": 2, "totalTokens": 2}
    assert "messageMetadata" not in finish


def test_abandoned_stream_has_no_done():
    async def gone():
        return True

    turn = prepare_markdown_turn("one two")
    out = asyncio.run(frames(stream_turn(turn, NAMESPACED, is_disconnected=gone)))
    types = [json.loads(frame[len("data: "):])["type"] for frame in out]
    assert types == ["start", "text-start"]
