"""Command-line interface for Modernizer.

Responsibilities:
- Expose the normalization engine for files and standard input.
- List the rule catalog and the legacy model decision table.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Annotated

import typer

from .cli_rendering import (
    echo_model_mappings,
    echo_rule_list,
    echo_trace,
    exit_with_command_error,
)
from .config import ConfigLoader, NormalizerConfig
from .errors import CommandStageError
from .telemetry.logger import RunLogger, detach_default_handlers
from .text import model_mapper
from .text.rules import default_catalog

app = typer.Typer(
    name="modernizer",
    no_args_is_help=True,
    help="Rewrite legacy OpenAI SDK usage in source text.",
)


def _load_yaml_config(config_path: Path | None) -> NormalizerConfig:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return NormalizerConfig()

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _read_input(input_path: Path | None) -> str:
    """Read source text from a file, or from stdin when no path (or `-`) is given."""

    if input_path is None or str(input_path) == "-":
        return sys.stdin.read()
    try:
        return input_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="read-input",
            detail=f"Input file not found: `{input_path}`.",
            hint="Pass an existing file path, or pipe text through stdin.",
        ) from exc
    except UnicodeDecodeError as exc:
        raise CommandStageError(
            stage="read-input",
            detail=f"Input file `{input_path}` is not valid UTF-8 text.",
        ) from exc


def _write_output(text: str, out: Path | None) -> None:
    """Write normalized text to `out`, or to stdout when no path is given."""

    if out is None:
        typer.echo(text, nl=False)
        return
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise CommandStageError(
            stage="write-output",
            detail=f"Failed to write output file `{out}`: {exc}",
            hint="Verify the output directory is writable.",
        ) from exc


@app.command("normalize")
def normalize_command(
    input_path: Annotated[
        Path | None,
        typer.Argument(help="Source file to normalize. Reads stdin when omitted or `-`."),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write normalized text here instead of stdout."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with engine defaults."),
    ] = None,
    trace: Annotated[
        bool | None,
        typer.Option("--trace/--no-trace", help="Report applied rewrites on stderr."),
    ] = None,
    collapse_whitespace: Annotated[
        bool | None,
        typer.Option(
            "--collapse-whitespace/--keep-whitespace",
            help="Collapse whitespace runs before rewriting.",
        ),
    ] = None,
    context_radius: Annotated[
        int | None,
        typer.Option(
            "--context-radius",
            min=0,
            help="Characters around a match used for intent classification (default: whole input).",
        ),
    ] = None,
    disable_rule: Annotated[
        list[str] | None,
        typer.Option("--disable-rule", help="Rule id to skip. Repeatable."),
    ] = None,
) -> None:
    """Rewrite legacy SDK usage in a file or stdin."""

    logger: RunLogger | None = None
    try:
        base_config = _load_yaml_config(config_file)
        disabled = base_config.disabled_rules + tuple(
            rule_id for rule_id in (disable_rule or []) if rule_id not in base_config.disabled_rules
        )
        try:
            config = base_config.with_overrides(
                trace=trace,
                collapse_whitespace=collapse_whitespace,
                context_radius=context_radius,
                disabled_rules=disabled,
            )
        except ValueError as exc:
            raise CommandStageError(
                stage="config",
                detail=str(exc),
                hint="Run `modernizer rules` to list valid rule ids.",
            ) from exc

        source = _read_input(input_path)
        if config.trace:
            detach_default_handlers()
            logger = RunLogger(sink=sys.stderr)
            logger.log_stage_start("normalize")
        result = config.build_normalizer(logger=logger).normalize_with_trace(source)
        if logger is not None:
            logger.log_stage_complete("normalize", rewrites=len(result.applied))
        _write_output(result.text, out)
    except Exception as exc:
        if logger is not None:
            logger.log_stage_failure("normalize", type(exc).__name__)
        exit_with_command_error("normalize", exc)
    finally:
        if logger is not None:
            logger.close()

    if config.trace:
        echo_trace(result)


@app.command("rules")
def rules_command() -> None:
    """List catalog rules in execution order."""

    echo_rule_list(default_catalog().rules)


@app.command("models")
def models_command() -> None:
    """List legacy model identifiers and their modern replacements by intent."""

    echo_model_mappings(model_mapper.all_mappings())


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
