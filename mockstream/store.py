"""Collection store: lookup of canned interactions by request text.

Matching is two-stage:
1. exact: SHA-256 signature of the whitespace-normalized, lower-cased text
2. fuzzy: bag-of-words cosine similarity, best score at or above a threshold

The store is built once per loaded config and is read-only afterwards.
"""

from __future__ import annotations

import hashlib
import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mockstream.config import CollectionConfig, InteractionConfig, MockConfig

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_WORD = re.compile(r"[^\W_]+")


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip().lower()


def signature(text: str) -> str:
    """Stable fingerprint of a prompt, insensitive to case and spacing."""
    return hashlib.sha256(normalize_whitespace(text).encode()).hexdigest()


def tokenize(text: str) -> list[str]:
    return _WORD.findall(text.lower())


def cosine_similarity(a: str, b: str) -> float:
    """Cosine of the word-count vectors of ``a`` and ``b``; 0.0 when either is empty."""
    freq_a = Counter(tokenize(a))
    freq_b = Counter(tokenize(b))
    if not freq_a or not freq_b:
        return 0.0

    dot = sum(count * freq_b[token] for token, count in freq_a.items() if token in freq_b)
    magnitude_a = math.sqrt(sum(v * v for v in freq_a.values()))
    magnitude_b = math.sqrt(sum(v * v for v in freq_b.values()))
    return dot / (magnitude_a * magnitude_b)


@dataclass(frozen=True)
class CollectionMatch:
    collection_id: str
    interaction: InteractionConfig
    similarity: float


class CollectionStore:
    """Read-only index over the collections of one config."""

    def __init__(self, collections: list[CollectionConfig], threshold: float = 0.15):
        self.threshold = threshold
        self._collections = {c.id: c for c in collections}
        # {collection_id: {signature: interaction}}
        self._signatures: dict[str, dict[str, InteractionConfig]] = {
            c.id: {signature(i.input): i for i in c.interactions} for c in collections
        }

    @classmethod
    def from_config(cls, config: MockConfig) -> CollectionStore:
        return cls(config.collections, threshold=config.match_threshold)

    def __len__(self) -> int:
        return len(self._collections)

    def __contains__(self, collection_id: str) -> bool:
        return collection_id in self._collections

    def get(self, collection_id: str) -> CollectionConfig | None:
        return self._collections.get(collection_id)

    def lookup(self, collection_id: str, text: str) -> CollectionMatch | None:
        """Return the best interaction for ``text`` in a collection, or None.

        Raises KeyError for an unknown collection.
        """
        collection = self._collections[collection_id]

        exact = self._signatures[collection_id].get(signature(text))
        if exact is not None:
            logger.info(f"Exact match in '{collection_id}': interaction={exact.id}")
            return CollectionMatch(collection_id, exact, 1.0)

        scored = sorted(
            ((cosine_similarity(text, i.input), i) for i in collection.interactions),
            key=lambda pair: pair[0],
            reverse=True,
        )
        if scored and scored[0][0] >= self.threshold:
            score, best = scored[0]
            logger.info(
                f"Similarity match in '{collection_id}': "
                f"interaction={best.id}, similarity={score:.3f}"
            )
            return CollectionMatch(collection_id, best, score)

        logger.info(f"No match in '{collection_id}' for {len(text)}-char input")
        return None
