"""Typed records shared between Modernizer components."""

from .datatypes import (
    AppliedRewrite,
    ContextWindow,
    Intent,
    ModelMapping,
    ModelTier,
    NormalizationResult,
    Rule,
)

__all__ = [
    "AppliedRewrite",
    "ContextWindow",
    "Intent",
    "ModelMapping",
    "ModelTier",
    "NormalizationResult",
    "Rule",
]
