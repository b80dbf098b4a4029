"""Core datatypes shared across Modernizer modules.

Responsibilities:
- Represent immutable records exchanged between the catalog, resolver, and engine.
- Keep rule definitions declarative so catalogs stay read-only after construction.

Key types:
- `Intent`, `ModelTier`, `ModelMapping`, `ContextWindow`, `Rule`,
  `AppliedRewrite`, and `NormalizationResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import re
from typing import Callable, Union


class Intent(str, Enum):
    """Closed set of usage intents inferred from text around a match."""

    REASONING = "reasoning"
    EMBEDDING = "embedding"
    GENERAL = "general"


class ModelTier(str, Enum):
    """Capability tier a legacy model identifier belongs to."""

    FLAGSHIP_CHAT = "flagship-chat"
    COST_OPTIMIZED_CHAT = "cost-optimized-chat"
    HIGH_QUALITY_EMBEDDING = "high-quality-embedding"
    COST_OPTIMIZED_EMBEDDING = "cost-optimized-embedding"


@dataclass(frozen=True, slots=True)
class ModelMapping:
    """One legacy model identifier and its default modern replacement.

    Attributes:
        legacy_model: Retired model identifier as it appears in source text.
        modern_model: Replacement used when no stronger intent signal exists.
        tier: Capability tier used to look up intent-specific replacements.
        note: Short human-readable rationale for listings.
    """

    legacy_model: str
    modern_model: str
    tier: ModelTier
    note: str = ""


@dataclass(frozen=True, slots=True)
class ContextWindow:
    """Read-only view of the text surrounding one match.

    Attributes:
        source: Full text the match was found in.
        start: Inclusive match offset in `source`.
        end: Exclusive match offset in `source`.
        window_start: Inclusive offset where the window begins.
        window_end: Exclusive offset where the window ends.
    """

    source: str
    start: int
    end: int
    window_start: int
    window_end: int

    @property
    def text(self) -> str:
        """Return the window slice of the source text."""

        return self.source[self.window_start : self.window_end]

    @property
    def before(self) -> str:
        return self.source[self.window_start : self.start]

    @property
    def after(self) -> str:
        return self.source[self.end : self.window_end]


ReplacementFunc = Callable[["re.Match[str]", ContextWindow], str]
Replacement = Union[str, ReplacementFunc]


@dataclass(frozen=True, slots=True)
class Rule:
    """Declarative legacy-to-modern rewrite rule.

    Attributes:
        rule_id: Stable identifier used in traces, listings, and tests.
        pattern: Compiled pattern matched against the current text.
        replacement: Fixed `re` template, or callable receiving the match and
            its context window.
        order: Execution order; lower values run first.
        context_sensitive: Whether the replacement consults the context window.
        description: One-line summary for rule listings.
    """

    rule_id: str
    pattern: re.Pattern[str]
    replacement: Replacement
    order: int
    context_sensitive: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        if self.context_sensitive and isinstance(self.replacement, str):
            raise ValueError(
                f"Rule `{self.rule_id}` is context-sensitive but has a fixed replacement."
            )


@dataclass(frozen=True, slots=True)
class AppliedRewrite:
    """Record of one substitution made by a rule.

    Offsets refer to the text as it was when the rule ran.
    """

    rule_id: str
    start: int
    end: int
    original: str
    replacement: str


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    """Normalized text with the ordered rewrites that produced it."""

    text: str
    applied: tuple[AppliedRewrite, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        return any(item.original != item.replacement for item in self.applied)

    def rules_fired(self) -> tuple[str, ...]:
        """Return distinct rule ids in first-fired order."""

        seen: dict[str, None] = {}
        for item in self.applied:
            seen.setdefault(item.rule_id, None)
        return tuple(seen)
