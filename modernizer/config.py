"""Configuration model and loaders for Modernizer.

Responsibilities:
- Define engine configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Build a configured `Normalizer` from validated settings.

Key types:
- `NormalizerConfig`: normalized settings for one engine instance.
- `ConfigLoader`: static construction helpers for `NormalizerConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import (
    normalize_optional_string,
    parse_identifier_list,
    parse_permissive_boolean,
)
from .telemetry.logger import RunLogger
from .text.normalizer import Normalizer
from .text.rules import default_catalog


@dataclass(frozen=True, slots=True)
class NormalizerConfig:
    """Settings for one normalization engine.

    Attributes:
        context_radius: Characters on each side of a match used for intent
            classification; `None` uses the entire input.
        collapse_whitespace: Collapse whitespace runs before rewriting.
        disabled_rules: Rule ids removed from the default catalog.
        trace: Report applied rewrites after normalization.
    """

    context_radius: int | None = None
    collapse_whitespace: bool = False
    disabled_rules: tuple[str, ...] = field(default_factory=tuple)
    trace: bool = False

    def validate(self) -> None:
        """Validate configuration values and raise `ValueError` on invalid input."""

        if self.context_radius is not None and self.context_radius < 0:
            raise ValueError("`context_radius` must be a non-negative integer.")
        unknown = sorted(set(self.disabled_rules).difference(default_catalog().rule_ids))
        if unknown:
            raise ValueError(f"`disabled_rules` includes unknown rule id(s): {', '.join(unknown)}.")

    def with_overrides(self, **overrides: Any) -> NormalizerConfig:
        """Return a copy where every non-`None` override replaces the stored value."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        config = replace(self, **applied)
        config.validate()
        return config

    def build_normalizer(self, logger: RunLogger | None = None) -> Normalizer:
        """Create a `Normalizer` honoring this configuration."""

        catalog = default_catalog()
        if self.disabled_rules:
            catalog = catalog.without(*self.disabled_rules)
        return Normalizer(
            catalog,
            context_radius=self.context_radius,
            collapse_whitespace=self.collapse_whitespace,
            logger=logger,
        )


class ConfigLoader:
    """Factory methods for creating `NormalizerConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "context_radius",
            "collapse_whitespace",
            "disabled_rules",
            "trace",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> NormalizerConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> NormalizerConfig:
        """Create a validated config from `MODERNIZER_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        config = NormalizerConfig(
            context_radius=ConfigLoader._optional_env_non_negative_int(
                env_map, "MODERNIZER_CONTEXT_RADIUS"
            ),
            collapse_whitespace=ConfigLoader._optional_env_boolean(
                env_map, "MODERNIZER_COLLAPSE_WHITESPACE"
            )
            or False,
            disabled_rules=parse_identifier_list(env_map.get("MODERNIZER_DISABLED_RULES")),
            trace=ConfigLoader._optional_env_boolean(env_map, "MODERNIZER_TRACE") or False,
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> NormalizerConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        raw_rules = payload.get("disabled_rules")
        if raw_rules is not None and not isinstance(raw_rules, (list, tuple, str)):
            raise ValueError(
                f"{source_label} field `disabled_rules` must be a list or comma-separated string."
            )

        config = NormalizerConfig(
            context_radius=ConfigLoader._optional_non_negative_int(
                payload, "context_radius", source_label
            ),
            collapse_whitespace=ConfigLoader._optional_boolean(
                payload, "collapse_whitespace", source_label, default=False
            ),
            disabled_rules=parse_identifier_list(raw_rules),
            trace=ConfigLoader._optional_boolean(payload, "trace", source_label, default=False),
        )
        config.validate()
        return config

    @staticmethod
    def _optional_non_negative_int(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> int | None:
        """Read an optional non-negative integer; blank or `null` means unset."""

        if key not in payload:
            return None

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a non-negative integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return None
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a non-negative integer."
                ) from exc

        if parsed < 0:
            raise ValueError(f"{source_label} field `{key}` must be a non-negative integer.")
        return parsed

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_env_non_negative_int(env: Mapping[str, str], key: str) -> int | None:
        """Read an optional non-negative integer from environment mapping."""

        value = normalize_optional_string(env.get(key))
        if value is None:
            return None
        try:
            parsed = int(value)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be an integer.") from exc
        if parsed < 0:
            raise ValueError(f"Environment variable `{key}` must be non-negative.")
        return parsed

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Read an optional boolean from environment mapping."""

        value = normalize_optional_string(env.get(key))
        if value is None:
            return None
        parsed = parse_permissive_boolean(value)
        if parsed is None:
            raise ValueError(
                f"Environment variable `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
