"""Typer CLI commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from shellgate.cli.output import print_classification, print_error, print_result, print_settings
from shellgate.cli.prompts import terminal_prompter
from shellgate.config.settings import Settings
from shellgate.logging_config import setup_logging
from shellgate.models.execution import DeniedResult, ExecutionOptions
from shellgate.policy.classifier import classify

app = typer.Typer(name="shellgate", help="Risk-gated command execution for agents.")

EXIT_DENIED = 2

_PASSTHROUGH = {"allow_interspersed_args": False, "ignore_unknown_options": True}


def _load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        print_error(f"Failed to load settings: {exc}")
        raise typer.Exit(1)


def _get_pipeline(settings: Settings):
    from shellgate.main import build_pipeline
    return build_pipeline(settings=settings)


@app.command(context_settings=_PASSTHROUGH)
def run(
    command: str = typer.Argument(..., help="Program to run"),
    args: Optional[list[str]] = typer.Argument(None, help="Arguments, passed literally"),
    timeout: Optional[float] = typer.Option(None, "--timeout", min=0.001, help="Timeout in seconds"),
    cwd: Optional[Path] = typer.Option(None, "--cwd", help="Working directory"),
    skip_permissions: bool = typer.Option(
        False, "--dangerously-skip-permissions", help="Skip consent prompts (blocked commands stay blocked)"
    ),
    non_interactive: bool = typer.Option(False, "--non-interactive", help="Never prompt; deny instead"),
) -> None:
    """Run a command through the risk classifier and consent gate."""
    settings = _load_settings()
    setup_logging(settings.log_level)
    argv = args or []

    async def _run():
        pipeline = _get_pipeline(settings)
        return await pipeline.run_gated(
            command,
            argv,
            raw_line=" ".join([command, *argv]),
            prompter=None if non_interactive else terminal_prompter,
            bypass=skip_permissions,
            options=ExecutionOptions(timeout=timeout, working_dir=cwd),
        )

    result = asyncio.run(_run())
    print_result(result, max_lines=settings.display_max_lines)

    if isinstance(result, DeniedResult):
        raise typer.Exit(EXIT_DENIED)
    if not result.success:
        raise typer.Exit(result.exit_code or 1)


@app.command(name="classify", context_settings=_PASSTHROUGH)
def classify_command(
    command: str = typer.Argument(..., help="Program name"),
    args: Optional[list[str]] = typer.Argument(None, help="Arguments"),
) -> None:
    """Show the risk tier of a command without running it."""
    argv = args or []
    print_classification(classify(command, argv, " ".join([command, *argv])))


@app.command(name="config")
def show_config() -> None:
    """Show current configuration."""
    print_settings(_load_settings())
