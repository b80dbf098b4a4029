"""CLI output helpers for Modernizer commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import CommandStageError
from .models.datatypes import ModelMapping, NormalizationResult, Rule
from .text.model_mapper import DECISION_TABLE


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, CommandStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_trace(result: NormalizationResult) -> None:
    """Print one line per applied rewrite to stderr."""

    typer.echo(f"Rewrites applied: {len(result.applied)}", err=True)
    for item in result.applied:
        typer.echo(
            f"  [{item.rule_id}] {item.start}-{item.end}: "
            f"{item.original!r} -> {item.replacement!r}",
            err=True,
        )


def echo_rule_list(rules: tuple[Rule, ...]) -> None:
    """Print catalog rules in execution order."""

    for rule in rules:
        marker = " (context)" if rule.context_sensitive else ""
        typer.echo(f"{rule.order:>3}  {rule.rule_id}{marker}  {rule.description}")


def echo_model_mappings(mappings: tuple[ModelMapping, ...]) -> None:
    """Print the legacy model decision table."""

    for mapping in mappings:
        choices = ", ".join(
            f"{intent.value}={model}"
            for intent, model in DECISION_TABLE[mapping.tier].items()
        )
        typer.echo(f"{mapping.legacy_model} -> {mapping.modern_model} [{mapping.tier.value}] {choices}")
