"""Prompt classifier — derives a display subject and a coarse category.

Both functions are pure and total: any string (including "") yields a
result, and the same text always yields the same result.
"""

from __future__ import annotations

import re
from typing import Literal

Category = Literal["person", "company", "generic"]

PLACEHOLDER_SUBJECT = "Lorem Ipsum"
MAX_SUBJECT_LENGTH = 60
ELLIPSIS = "…"

_LEADING_PHRASE = re.compile(
    r"^(tell me about|who is|who was|what is|describe|give me|explain)\s+",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")

# Checked in order; the first vocabulary with a hit wins.
PERSON_TERMS = ("who", "person", "biography", "profile", "individual", "speaker", "author")
COMPANY_TERMS = (
    "company",
    "startup",
    "business",
    "organization",
    "corporation",
    "firm",
    "enterprise",
    "team",
)


def derive_subject(prompt: str) -> str:
    """Strip a leading question phrase and clean up what is left.

    "Who is Ada Lovelace?" -> "Ada Lovelace?"
    ""                     -> "Lorem Ipsum"
    """
    if not isinstance(prompt, str):
        return PLACEHOLDER_SUBJECT
    cleaned = _LEADING_PHRASE.sub("", prompt).strip()
    cleaned = _WHITESPACE.sub(" ", cleaned)
    if not cleaned:
        return PLACEHOLDER_SUBJECT
    if len(cleaned) > MAX_SUBJECT_LENGTH:
        return cleaned[: MAX_SUBJECT_LENGTH - 3] + ELLIPSIS
    return cleaned


def classify(prompt: str) -> Category:
    """Map a prompt to person / company / generic by keyword containment."""
    if not isinstance(prompt, str):
        return "generic"
    text = prompt.lower()
    if any(term in text for term in PERSON_TERMS):
        return "person"
    if any(term in text for term in COMPANY_TERMS):
        return "company"
    return "generic"
