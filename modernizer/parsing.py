"""Shared parsing helpers for config and CLI value normalization."""

from __future__ import annotations


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_identifier_list(value: object) -> tuple[str, ...]:
    """Split a comma-separated or list value into unique, ordered identifiers."""

    if value is None:
        return ()
    raw_items = value if isinstance(value, (list, tuple)) else str(value).split(",")
    items: dict[str, None] = {}
    for raw in raw_items:
        normalized = normalize_optional_string(raw)
        if normalized is not None:
            items.setdefault(normalized, None)
    return tuple(items)
