"""Normalization engine for legacy SDK usage in source text.

Responsibilities:
- Apply every catalog rule exactly once, in catalog order, to the cumulative text.
- Pass unmatched text through unchanged and never mutate caller input.
- Report applied rewrites through an optional trace and injected logger.
"""

from __future__ import annotations

from ..models.datatypes import AppliedRewrite, NormalizationResult
from ..telemetry.logger import RunLogger
from .cleaners import TextCleaner
from .context import ContextResolver
from .rules import RuleCatalog, apply_rule, default_catalog


class Normalizer:
    """Rewrite legacy SDK usage into current call shapes, models, and fields."""

    def __init__(
        self,
        catalog: RuleCatalog | None = None,
        *,
        context_radius: int | None = None,
        collapse_whitespace: bool = False,
        logger: RunLogger | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            catalog: Rules to apply; defaults to the shared default catalog.
            context_radius: Characters on each side of a match used for intent
                classification. `None` uses the entire input.
            collapse_whitespace: Collapse whitespace runs before rewriting.
            logger: Optional run logger receiving per-rule events.
        """

        self.catalog = catalog if catalog is not None else default_catalog()
        self.resolver = ContextResolver(context_radius)
        self._cleaner = TextCleaner() if collapse_whitespace else None
        self._logger = logger

    def normalize(self, text: str) -> str:
        """Return `text` with every legacy pattern rewritten."""

        return self.normalize_with_trace(text).text

    def normalize_with_trace(self, text: str) -> NormalizationResult:
        """Return normalized text with the ordered record of applied rewrites.

        Raises:
            TypeError: If `text` is not a string.
        """

        if not isinstance(text, str):
            raise TypeError(f"normalize() expects str input, got {type(text).__name__}.")

        current = self._cleaner.clean(text) if self._cleaner is not None else text
        applied: list[AppliedRewrite] = []
        for rule in self.catalog:
            current, records = apply_rule(rule, current, self.resolver)
            if records:
                applied.extend(records)
                if self._logger is not None:
                    self._logger.log_rule_applied(rule.rule_id, len(records))
        return NormalizationResult(text=current, applied=tuple(applied))


_DEFAULT_NORMALIZER = Normalizer()


def normalize(text: str) -> str:
    """Normalize `text` with the default catalog and whole-input context."""

    return _DEFAULT_NORMALIZER.normalize(text)


def normalize_with_trace(text: str) -> NormalizationResult:
    """Normalize `text` with the default engine and return the rewrite trace."""

    return _DEFAULT_NORMALIZER.normalize_with_trace(text)
