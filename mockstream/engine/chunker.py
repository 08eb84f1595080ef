"""Chunker. Splits finished text into ordered delivery fragments.

Two policies:
- bounded:  words packed into chunks of at most ``max_length`` characters
            (used for synthesized and canned markdown replies)
- tokens:   every word and every whitespace run is its own chunk
            (used for literal filler text; lossless)
"""

from __future__ import annotations

import re

DEFAULT_MAX_CHUNK_LENGTH = 60

# The capture group keeps the whitespace runs in the split result.
_SPLIT = re.compile(r"(\s+)")


def _tokens(text: str) -> list[str]:
    return [token for token in _SPLIT.split(text) if token]


def chunk_bounded(text: str, max_length: int = DEFAULT_MAX_CHUNK_LENGTH) -> list[str]:
    """Pack whitespace-preserving tokens into chunks no longer than ``max_length``.

    A token is never split, so a single token longer than ``max_length``
    becomes a chunk of its own. Chunks that are blank after trimming are
    dropped; whitespace inside a kept chunk is left alone.
    """
    if not text:
        return []

    chunks: list[str] = []
    buffer = ""
    for token in _tokens(text):
        if buffer and len(buffer) + len(token) > max_length:
            chunks.append(buffer)
            buffer = ""
        buffer += token
    if buffer:
        chunks.append(buffer)

    return [chunk for chunk in chunks if chunk.strip()]


def chunk_tokens(text: str) -> list[str]:
    """One chunk per word or whitespace run; ``"".join(result) == text``."""
    if not text:
        return []
    return _tokens(text)
