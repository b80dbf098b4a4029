"""Legacy model identifier decision table.

Responsibilities:
- Register every known retired model identifier with its capability tier.
- Select a modern replacement from `(tier, intent)` without nested branching.
- Provide an explicit default for identifiers that are not registered.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..models.datatypes import Intent, ModelMapping, ModelTier
from .context import classify_intent


_FLAGSHIP_CHAT_MODEL = "gpt-4.1"
_COST_OPTIMIZED_CHAT_MODEL = "gpt-4.1-mini"
_REASONING_MODEL = "o1"
_COST_OPTIMIZED_REASONING_MODEL = "o1-mini"
_LARGE_EMBEDDING_MODEL = "text-embedding-3-large"
_SMALL_EMBEDDING_MODEL = "text-embedding-3-small"


MODEL_MAPPINGS: tuple[ModelMapping, ...] = (
    ModelMapping("text-davinci-003", _FLAGSHIP_CHAT_MODEL, ModelTier.FLAGSHIP_CHAT, "High-quality chat completion"),
    ModelMapping("text-davinci-002", _FLAGSHIP_CHAT_MODEL, ModelTier.FLAGSHIP_CHAT, "High-quality chat completion"),
    ModelMapping("text-davinci-001", _COST_OPTIMIZED_CHAT_MODEL, ModelTier.COST_OPTIMIZED_CHAT, "Cost-optimized chat"),
    ModelMapping("davinci", _FLAGSHIP_CHAT_MODEL, ModelTier.FLAGSHIP_CHAT, "High-quality chat completion"),
    ModelMapping("text-curie-001", _COST_OPTIMIZED_CHAT_MODEL, ModelTier.COST_OPTIMIZED_CHAT, "Cost-optimized for simple tasks"),
    ModelMapping("text-babbage-001", _COST_OPTIMIZED_CHAT_MODEL, ModelTier.COST_OPTIMIZED_CHAT, "Cost-optimized for simple tasks"),
    ModelMapping("text-ada-001", _COST_OPTIMIZED_CHAT_MODEL, ModelTier.COST_OPTIMIZED_CHAT, "Cost-optimized for simple tasks"),
    ModelMapping("curie", _COST_OPTIMIZED_CHAT_MODEL, ModelTier.COST_OPTIMIZED_CHAT, "Cost-optimized for simple tasks"),
    ModelMapping("babbage", _COST_OPTIMIZED_CHAT_MODEL, ModelTier.COST_OPTIMIZED_CHAT, "Cost-optimized for simple tasks"),
    ModelMapping("ada", _COST_OPTIMIZED_CHAT_MODEL, ModelTier.COST_OPTIMIZED_CHAT, "Cost-optimized for simple tasks"),
    ModelMapping("text-embedding-ada-002", _LARGE_EMBEDDING_MODEL, ModelTier.HIGH_QUALITY_EMBEDDING, "High-quality embeddings"),
    ModelMapping("text-search-ada-doc-001", _SMALL_EMBEDDING_MODEL, ModelTier.COST_OPTIMIZED_EMBEDDING, "Cost-optimized embeddings"),
    ModelMapping("text-search-ada-query-001", _SMALL_EMBEDDING_MODEL, ModelTier.COST_OPTIMIZED_EMBEDDING, "Cost-optimized embeddings"),
)

# Identifiers short enough to collide with ordinary words.
SHORT_LEGACY_MODELS: frozenset[str] = frozenset({"davinci", "curie", "babbage", "ada"})

DECISION_TABLE: Mapping[ModelTier, Mapping[Intent, str]] = MappingProxyType(
    {
        ModelTier.FLAGSHIP_CHAT: MappingProxyType(
            {
                Intent.GENERAL: _FLAGSHIP_CHAT_MODEL,
                Intent.REASONING: _REASONING_MODEL,
                Intent.EMBEDDING: _FLAGSHIP_CHAT_MODEL,
            }
        ),
        ModelTier.COST_OPTIMIZED_CHAT: MappingProxyType(
            {
                Intent.GENERAL: _COST_OPTIMIZED_CHAT_MODEL,
                Intent.REASONING: _COST_OPTIMIZED_REASONING_MODEL,
                Intent.EMBEDDING: _COST_OPTIMIZED_CHAT_MODEL,
            }
        ),
        ModelTier.HIGH_QUALITY_EMBEDDING: MappingProxyType(
            {intent: _LARGE_EMBEDDING_MODEL for intent in Intent}
        ),
        ModelTier.COST_OPTIMIZED_EMBEDDING: MappingProxyType(
            {intent: _SMALL_EMBEDDING_MODEL for intent in Intent}
        ),
    }
)

UNKNOWN_MODEL_DEFAULTS: Mapping[Intent, str] = MappingProxyType(
    {
        Intent.GENERAL: _FLAGSHIP_CHAT_MODEL,
        Intent.REASONING: _REASONING_MODEL,
        Intent.EMBEDDING: _SMALL_EMBEDDING_MODEL,
    }
)

_MAPPINGS_BY_LEGACY_ID: Mapping[str, ModelMapping] = MappingProxyType(
    {mapping.legacy_model: mapping for mapping in MODEL_MAPPINGS}
)


def lookup(legacy_model: str) -> ModelMapping | None:
    """Return the registered mapping for a legacy identifier, if any."""

    return _MAPPINGS_BY_LEGACY_ID.get(legacy_model)


def is_legacy_model(name: str) -> bool:
    return name in _MAPPINGS_BY_LEGACY_ID


def all_mappings() -> tuple[ModelMapping, ...]:
    """Return every registered legacy mapping in declaration order."""

    return MODEL_MAPPINGS


def model_for_intent(legacy_model: str, intent: Intent) -> str:
    """Resolve the decision table entry for an already-classified intent."""

    mapping = lookup(legacy_model)
    if mapping is None:
        return UNKNOWN_MODEL_DEFAULTS[intent]
    return DECISION_TABLE[mapping.tier][intent]


def select_model(legacy_model: str, context: str) -> str:
    """Select a modern model identifier for `legacy_model` given free-form context.

    Args:
        legacy_model: Model identifier found in source text.
        context: Text whose keywords signal the intended usage.

    Returns:
        Modern model identifier. Unregistered identifiers fall back to
        `UNKNOWN_MODEL_DEFAULTS` for the classified intent.
    """

    return model_for_intent(legacy_model, classify_intent(context))
