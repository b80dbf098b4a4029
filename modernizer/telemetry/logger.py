"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic stage and rule-level logs through `loguru`.
- Stay a pure side channel: nothing logged here feeds back into normalized text.
"""

from __future__ import annotations

import itertools
import sys
from typing import TextIO

from loguru import logger as _loguru_logger

_LOGGER_TOKENS = itertools.count(1)


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class RunLogger:
    """Emit deterministic phase logs for normalization activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        token = next(_LOGGER_TOKENS)
        self._logger = _loguru_logger.bind(run_logger=token)
        # Each instance only sees its own records; other handlers are left alone.
        self._handler_id: int | None = _loguru_logger.add(
            self._sink,
            format="{message}",
            level=level,
            colorize=False,
            filter=lambda record: record["extra"].get("run_logger") == token,
        )

    def close(self) -> None:
        """Detach this logger's sink from loguru."""

        if self._handler_id is not None:
            _loguru_logger.remove(self._handler_id)
            self._handler_id = None

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[phase] level={level} stage={stage} event={event}{_format_context(context)}"
        self._logger.log(level, line)

    def log_stage_start(self, stage: str) -> None:
        self._emit("INFO", "start", stage)

    def log_stage_complete(self, stage: str, **context: object) -> None:
        self._emit("INFO", "complete", stage, **context)

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Emit a stage-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type)

    def log_rule_applied(self, rule_id: str, count: int) -> None:
        """Emit one event for a rule that rewrote at least one span."""

        self._emit("INFO", "rule_applied", "normalize", rule=rule_id, count=count)


def detach_default_handlers() -> None:
    """Remove every configured loguru handler, including loguru's stderr default.

    Applications call this once before creating their own `RunLogger` so that
    lines are not echoed twice. Library code never calls it.
    """

    _loguru_logger.remove()
