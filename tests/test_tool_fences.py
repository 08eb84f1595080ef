import pytest

from mockstream.engine.chunker import chunk_bounded
from mockstream.engine.tool_fences import (
    DEFAULT_ERROR_TEXT,
    ToolCall,
    parse_fence_info,
    parse_tool_fence,
    split_markdown,
)

SEARCH_FENCE = (
    "```tool\n"
    '{"toolName": "search", "toolCallId": "call-1", '
    '"input": {"query": "weather"}, "output": {"temp": 21}}\n'
    "```"
)


def test_json_fence_becomes_tool_call():
    chunks = split_markdown(f"Before\n\n{SEARCH_FENCE}\n\nAfter")
    assert chunks[:2] == ["Before", "\n\n"]
    assert chunks[-2:] == ["\n\n", "After"]
    call = chunks[2]
    assert isinstance(call, ToolCall)
    assert call.tool_call_id == "call-1"
    assert call.tool_name == "search"
    assert call.input == {"query": "weather"}
    assert call.output == {"temp": 21}


@pytest.mark.parametrize(
    "info, expected",
    [
        (" search call-9", ("search", "call-9")),
        (" name=lookup id='abc'", ("lookup", "abc")),
        (' toolName="fetch"', ("fetch", None)),
        ("", (None, None)),
    ],
)
def test_fence_info(info, expected):
    assert parse_fence_info(info) == expected


def test_header_wins_over_body():
    call = parse_tool_fence('```tool calc id=h-1\n{"toolName": "other", "id": "b-1"}\n```', "tool-call-1")
    assert (call.tool_name, call.tool_call_id) == ("calc", "h-1")


def test_yaml_body_and_fallback_names():
    call = parse_tool_fence("```tool\ninput:\n  city: Paris\n```", "tool-call-3")
    assert call.tool_call_id == "tool-call-3"
    assert call.tool_name == "tool"
    assert call.input == {"city": "Paris"}
    assert call.has_output is False


def test_empty_body_is_a_bare_call():
    call = parse_tool_fence("```tool ping\n```", "tool-call-1")
    assert call.tool_name == "ping"
    assert [e.type for e in call.events()] == ["tool-input-available"]
    assert call.events()[0].input == {}


@pytest.mark.parametrize("body", ["[1, 2, 3]", "{unclosed: [", "just words"])
def test_unusable_fence_streams_as_text(body):
    markdown = f"```tool\n{body}\n```"
    chunks = split_markdown(markdown)
    assert all(isinstance(c, str) for c in chunks)
    assert "".join(chunks) == markdown


def test_fallback_ids_follow_fence_order():
    markdown = "```tool a\n{}\n```\ntext\n```tool b\n{}\n```"
    calls = [c for c in split_markdown(markdown) if isinstance(c, ToolCall)]
    assert [c.tool_call_id for c in calls] == ["tool-call-1", "tool-call-2"]


def test_output_event():
    events = parse_tool_fence(SEARCH_FENCE, "x").events()
    assert [e.type for e in events] == ["tool-input-available", "tool-output-available"]
    dumped = events[1].model_dump(by_alias=True)
    assert dumped == {"type": "tool-output-available", "toolCallId": "call-1", "output": {"temp": 21}}


def test_error_event():
    call = parse_tool_fence('```tool\n{"toolName": "pay", "error": "card declined"}\n```', "x")
    events = call.events()
    assert events[1].type == "tool-output-error"
    assert events[1].error_text == "card declined"


def test_error_state_without_text_uses_default():
    call = parse_tool_fence('```tool\n{"state": "output-denied", "output": 1}\n```', "x")
    assert call.events()[1].error_text == DEFAULT_ERROR_TEXT


def test_output_available_state_without_output():
    call = parse_tool_fence('```tool\n{"state": "output-available"}\n```', "x")
    assert call.events()[1].output == {}


def test_custom_text_chunker():
    chunks = split_markdown("alpha beta gamma", lambda text: chunk_bounded(text, 11))
    assert chunks == ["alpha beta ", "gamma"]
