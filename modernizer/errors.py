"""Domain exceptions for catalog construction and CLI diagnostics."""

from __future__ import annotations


class RuleCatalogError(ValueError):
    """Raised when a rule catalog is built or queried with invalid rule ids."""


class CommandStageError(RuntimeError):
    """Raised when a specific CLI command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
