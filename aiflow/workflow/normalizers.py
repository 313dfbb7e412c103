"""Snap free-text model replies onto fixed label sets.

Models do not reliably return exactly one label, so matching is substring
containment with a deterministic fallback.
"""

import re

from aiflow.workflow.models import CATEGORIES, DEFAULT_CATEGORY, DEFAULT_EMOTION, EMOTIONS

_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text.lower().strip())


def normalize_emotion(text: str) -> str:
    """Return the first emotion mentioned in ``text``, capitalized.

    Emotions are checked in priority order: stressed, happy, sad, angry,
    neutral. Falls back to ``Neutral``.
    """
    lowered = text.lower().strip()
    for emotion in EMOTIONS:
        if emotion in lowered:
            return emotion.capitalize()
    return DEFAULT_EMOTION


def normalize_category(text: str) -> str:
    """Return the first category label contained in ``text``.

    Falls back to ``Personal & General``.
    """
    collapsed = _collapse(text)
    for category in CATEGORIES:
        if _collapse(category) in collapsed:
            return category
    return DEFAULT_CATEGORY
