"""Usage estimator: a coarse four-characters-per-token heuristic, not a tokenizer."""

from __future__ import annotations

import math

from mockstream.schemas import Usage

CHARS_PER_TOKEN = 4


def _length(text: object) -> int:
    return len(text) if isinstance(text, str) else 0


def estimate(prompt_text: str, response_text: str) -> Usage:
    """Approximate token counts for one prompt/response pair.

    inputTokens is 0 only for an empty prompt; output and total never drop
    below 1.
    """
    prompt_len = _length(prompt_text)
    response_len = _length(response_text)

    input_tokens = max(1, math.ceil(prompt_len / CHARS_PER_TOKEN)) if prompt_len else 0
    return Usage(
        input_tokens=input_tokens,
        output_tokens=max(1, math.ceil(response_len / CHARS_PER_TOKEN)),
        total_tokens=max(1, math.ceil((prompt_len + response_len) / CHARS_PER_TOKEN)),
    )
