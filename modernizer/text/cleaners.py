"""Optional whitespace cleanup applied before rewrite rules.

Responsibilities:
- Provide composable cleanup rules for pasted or scraped code excerpts.
- Keep preprocessing predictable for reproducibility.
"""

from __future__ import annotations

import re
from typing import Protocol


class CleanerRule(Protocol):
    """Protocol for text cleaning rules."""

    def apply(self, text: str) -> str:
        """Apply a single cleaning transformation."""


class NormalizeLineEndings:
    """Convert Windows and old Mac line endings to `\\n`."""

    def apply(self, text: str) -> str:
        return text.replace("\r\n", "\n").replace("\r", "\n")


class CollapseWhitespace:
    """Collapse every whitespace run, newlines included, into one space."""

    def apply(self, text: str) -> str:
        """Collapse whitespace runs and strip both ends."""

        return re.sub(r"\s+", " ", text).strip()


class TextCleaner:
    """Apply a sequence of deterministic cleaner rules."""

    def __init__(self, rules: list[CleanerRule] | None = None) -> None:
        """Initialize with custom rules or default rule sequence."""

        self.rules = rules or [
            NormalizeLineEndings(),
            CollapseWhitespace(),
        ]

    def clean(self, text: str) -> str:
        """Apply all configured rules in order."""

        current = text
        for rule in self.rules:
            current = rule.apply(current)
        return current
