"""Top-level package for Modernizer.

This package rewrites legacy OpenAI SDK usage found in free-form text
(deprecated call shapes, retired model identifiers, renamed parameters, and
superseded response-access paths) into current equivalents. The main entry
points are `normalize`, `normalize_with_trace`, and `Normalizer`.
"""

from .models.datatypes import NormalizationResult
from .text.normalizer import Normalizer, normalize, normalize_with_trace
from .text.rules import RuleCatalog, default_catalog

__all__ = [
    "NormalizationResult",
    "Normalizer",
    "RuleCatalog",
    "__version__",
    "default_catalog",
    "normalize",
    "normalize_with_trace",
]

__version__ = "0.1.0"
