"""Lorem source: parameter-driven filler text for the /api/lorem variant.

The engine only depends on the ``TextSource`` protocol; ``LoremSource`` is
the default implementation, a seedable word-list generator.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Literal, Protocol

Units = Literal["words", "sentences", "paragraphs"]

LOREM_WORDS = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua curabitur non nulla sit amet nisl "
    "tempor convallis quis ac lectus phasellus viverra nulla ut metus varius laoreet "
    "quisque rutrum aenean imperdiet etiam ultricies nisi vel augue curabitur "
    "ullamcorper ultricies nisi nam eget dui"
).split()


@dataclass(frozen=True)
class LoremParams:
    """Structural bounds for generated text. Defaults mirror the HTTP defaults."""

    count: int = 1
    paragraph_lower_bound: int = 3
    paragraph_upper_bound: int = 7
    sentence_lower_bound: int = 5
    sentence_upper_bound: int = 15
    suffix: str = "\n"
    units: Units = "sentences"
    words: tuple[str, ...] | None = None


class TextSource(Protocol):
    def generate(self, params: LoremParams) -> str: ...


class LoremSource:
    """Builds words, sentences and paragraphs from a vocabulary.

    - words:      ``count`` words joined by spaces
    - sentences:  ``count`` capitalised sentences ending in "."
    - paragraphs: ``count`` paragraphs joined by ``suffix``
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def _words(self, vocabulary: tuple[str, ...] | list[str], n: int) -> list[str]:
        return [self.rng.choice(vocabulary) for _ in range(n)]

    def _sentence(self, vocabulary, params: LoremParams) -> str:
        n = self.rng.randint(params.sentence_lower_bound, params.sentence_upper_bound)
        words = self._words(vocabulary, n)
        text = " ".join(words)
        return text[:1].upper() + text[1:] + "."

    def _paragraph(self, vocabulary, params: LoremParams) -> str:
        n = self.rng.randint(params.paragraph_lower_bound, params.paragraph_upper_bound)
        return " ".join(self._sentence(vocabulary, params) for _ in range(n))

    def generate(self, params: LoremParams) -> str:
        vocabulary = params.words or LOREM_WORDS
        match params.units:
            case "words":
                return " ".join(self._words(vocabulary, params.count))
            case "sentences":
                return " ".join(self._sentence(vocabulary, params) for _ in range(params.count))
            case "paragraphs":
                return params.suffix.join(
                    self._paragraph(vocabulary, params) for _ in range(params.count)
                )
            case _:
                raise ValueError(f"Unknown lorem units: {params.units}")
