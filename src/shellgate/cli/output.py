"""Rich display helpers for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shellgate.config.settings import Settings
from shellgate.models.execution import DeniedResult, ExecutionResult
from shellgate.models.risk import Classification, RiskLevel

console = Console()

_RISK_STYLES: dict[RiskLevel, str] = {
    RiskLevel.NORMAL: "green",
    RiskLevel.CAUTION: "yellow",
    RiskLevel.DANGEROUS: "red",
    RiskLevel.BLOCKED: "bold red",
}


def format_output(output: str | None, max_lines: int = 0) -> str:
    """Trim output and cap it at ``max_lines`` lines for display.

    This is presentation only; the executor's byte ceiling is separate.
    """
    if not output:
        return ""
    result = output.strip()
    if max_lines > 0:
        lines = result.split("\n")
        if len(lines) > max_lines:
            result = "\n".join(lines[:max_lines])
            result += f"\n... ({len(lines) - max_lines} more lines)"
    return result


def print_classification(classification: Classification) -> None:
    style = _RISK_STYLES[classification.level]
    table = Table(title="Risk Classification", show_header=False, expand=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Command", Text(classification.command))
    table.add_row("Risk", Text(classification.level.name, style=style))
    table.add_row("Reason", Text(classification.reason or "-"))
    console.print(table)


def print_result(result: ExecutionResult | DeniedResult, max_lines: int = 0) -> None:
    if isinstance(result, DeniedResult):
        print_error(f"Execution denied: {result.message}")
        return

    if result.success:
        console.print(Text(format_output(result.output, max_lines) or "(no output)"))
        return

    if result.output:
        console.print(Text(format_output(result.output, max_lines)))
    print_error(result.error or "Command failed")


def print_settings(settings: Settings) -> None:
    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value")
    table.add_row("Skip Permissions", str(settings.skip_permissions))
    table.add_row("Default Timeout", f"{settings.default_timeout:g}s")
    table.add_row("Max Output", f"{settings.max_output_bytes} bytes")
    table.add_row("Prompt Timeout", "none" if settings.prompt_timeout is None else f"{settings.prompt_timeout:g}s")
    table.add_row("Log Level", settings.log_level)
    table.add_row("Display Lines", str(settings.display_max_lines))
    console.print(table)


def print_error(message: str) -> None:
    console.print(Panel(Text(message, style="red"), title="Error", border_style="red"))


def print_info(message: str) -> None:
    console.print(Text(message, style="dim"))
