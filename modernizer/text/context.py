"""Context resolution for context-sensitive rewrite rules.

Responsibilities:
- Extract a bounded window of text around a match span.
- Classify usage intent from keyword evidence inside that window.
- Locate the call expression that encloses a match position.
"""

from __future__ import annotations

import re

from ..models.datatypes import ContextWindow, Intent


def _keyword_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    """Compile keywords into one case-insensitive word-start pattern.

    Multi-word keywords accept spaces or hyphens between words so that
    `step by step` also matches `step-by-step`.
    """

    alternatives = [
        r"[\s\-]+".join(re.escape(word) for word in keyword.split())
        for keyword in keywords
    ]
    return re.compile(r"\b(?:" + "|".join(alternatives) + ")", re.IGNORECASE)


REASONING_KEYWORDS: tuple[str, ...] = (
    "reasoning",
    "logic",
    "math",
    "problem solving",
    "analysis",
    "complex",
    "step by step",
    "chain of thought",
    "solve",
    "calculate",
)

EMBEDDING_KEYWORDS: tuple[str, ...] = (
    "embedding",
    "vector",
    "similarity",
    "search",
    "retrieval",
    "semantic",
)

# Checked in order; the first category with any hit wins.
_INTENT_SIGNALS: tuple[tuple[Intent, re.Pattern[str]], ...] = (
    (Intent.REASONING, _keyword_pattern(REASONING_KEYWORDS)),
    (Intent.EMBEDDING, _keyword_pattern(EMBEDDING_KEYWORDS)),
)

_CALLEE_RE = re.compile(r"([A-Za-z_][\w.]*)\s*$")
_CALLEE_LOOKBACK = 200
_OPENERS = {")": "(", "]": "[", "}": "{"}


def classify_intent(text: str) -> Intent:
    """Classify usage intent from keyword presence.

    Returns `Intent.GENERAL` when no category keyword is present.
    """

    for intent, pattern in _INTENT_SIGNALS:
        if pattern.search(text):
            return intent
    return Intent.GENERAL


def enclosing_call(text: str, position: int) -> str | None:
    """Return the dotted callee of the innermost open call before `position`.

    Bracket depth is tracked textually; string literals are not skipped.
    """

    depth: dict[str, int] = {"(": 0, "[": 0, "{": 0}
    for index in range(min(position, len(text)) - 1, -1, -1):
        character = text[index]
        if character in _OPENERS:
            depth[_OPENERS[character]] += 1
        elif character in depth:
            if depth[character]:
                depth[character] -= 1
                continue
            if character != "(":
                continue
            callee = _CALLEE_RE.search(text, max(0, index - _CALLEE_LOOKBACK), index)
            return callee.group(1) if callee else None
    return None


class ContextResolver:
    """Build bounded context windows for context-sensitive rules."""

    def __init__(self, radius: int | None = None) -> None:
        """Initialize with a character radius, or `None` for the whole input."""

        if radius is not None and radius < 0:
            raise ValueError("Context radius must be a non-negative integer or `None`.")
        self.radius = radius

    def window(self, text: str, start: int, end: int) -> ContextWindow:
        """Return the context window around the `[start, end)` span."""

        if self.radius is None:
            return ContextWindow(text, start, end, 0, len(text))
        return ContextWindow(
            text,
            start,
            end,
            max(0, start - self.radius),
            min(len(text), end + self.radius),
        )
