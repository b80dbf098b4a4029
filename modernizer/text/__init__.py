"""Rule catalog, context resolution, and normalization engine.

This package turns legacy SDK usage found in free-form text into the
current call shapes, model identifiers, parameter names, and access paths.
"""

from .cleaners import CollapseWhitespace, NormalizeLineEndings, TextCleaner
from .context import ContextResolver, classify_intent, enclosing_call
from .normalizer import Normalizer, normalize, normalize_with_trace
from .rules import DEFAULT_RULES, RuleCatalog, apply_rule, default_catalog

__all__ = [
    "CollapseWhitespace",
    "ContextResolver",
    "DEFAULT_RULES",
    "NormalizeLineEndings",
    "Normalizer",
    "RuleCatalog",
    "TextCleaner",
    "apply_rule",
    "classify_intent",
    "default_catalog",
    "enclosing_call",
    "normalize",
    "normalize_with_trace",
]
