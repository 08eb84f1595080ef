"""Response catalog: a per-category registry of markdown templates.

Templates are plain functions ``subject -> markdown`` decorated with
``@register(category)``. Registration order is selection order, so the
index a chooser returns always names the same template.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mockstream.engine.classifier import Category

logger = logging.getLogger(__name__)

ResponseTemplate = Callable[[str], str]
Chooser = Callable[[int], int]

_registry: dict[str, list[ResponseTemplate]] = {
    "person": [],
    "company": [],
    "generic": [],
}


def register(category: Category) -> Callable[[ResponseTemplate], ResponseTemplate]:
    """Append a template to ``category``'s list.

    Used as a decorator::

        @register("person")
        def short_bio(subject: str) -> str:
            ...
    """

    def decorator(template: ResponseTemplate) -> ResponseTemplate:
        _registry.setdefault(category, []).append(template)
        return template

    return decorator


def templates_for(category: str) -> list[ResponseTemplate]:
    """Return the templates registered for ``category`` (possibly empty)."""
    return list(_registry.get(category, []))


def fallback(subject: str) -> str:
    """Used only when a category has no templates."""
    return f"**{subject}**\n\nThere is nothing more to say about {subject} right now."


def seeded_chooser(seed: int | None = None) -> Chooser:
    """Index chooser backed by its own ``random.Random``.

    The same seed always yields the same sequence of indexes.
    """
    return random.Random(seed).randrange


def pick(category: Category, subject: str, choose: Chooser | None = None) -> str:
    """Render one template for ``category`` with ``subject`` substituted.

    ``choose(n)`` must return an index in ``range(n)``; defaults to an
    unseeded chooser.
    """
    templates = templates_for(category)
    if not templates:
        logger.warning(f"No templates registered for category '{category}', using fallback")
        return fallback(subject)

    choose = choose or seeded_chooser()
    index = choose(len(templates)) % len(templates)
    logger.debug(f"Picked template {index} of {len(templates)} for category '{category}'")
    return templates[index](subject)


# Auto-import template modules so the registry is populated on first access.
import mockstream.catalog.company as _company  # noqa: E402, F401
import mockstream.catalog.generic as _generic  # noqa: E402, F401
import mockstream.catalog.person as _person  # noqa: E402, F401
