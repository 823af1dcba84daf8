"""Permission gate: turns a risk verdict into an allow/deny decision."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from shellgate.models.permission import PermissionDecision, ReasonCode
from shellgate.models.risk import Classification, RiskLevel
from shellgate.policy.consent import ConsentSession

logger = logging.getLogger(__name__)

# Async capability supplied by the hosting session. ``None`` means there is
# no interactive channel at all, which is not the same as an empty answer.
Prompter = Callable[[str], Awaitable["str | None"]]

PANEL_WIDTH = 60

DANGEROUS_PROMPT = 'Type "yes" to confirm: '
STANDARD_PROMPT = "Allow? [y]es / [a]lways / [d]eny always / [n]o: "

_ONCE_ANSWERS = frozenset({"y", "yes"})
_ALWAYS_ANSWERS = frozenset({"a", "all", "always"})
_DENY_ALWAYS_ANSWERS = frozenset({"d", "deny"})


def _decision(allowed: bool, reason: ReasonCode) -> PermissionDecision:
    return PermissionDecision(allowed=allowed, reason=reason)


def _normalize(answer: str | None) -> str:
    return (answer or "").strip().lower()


class PermissionGate:
    def __init__(
        self,
        session: ConsentSession,
        console: Console | None = None,
        prompt_timeout: float | None = None,
    ) -> None:
        self._session = session
        self._console = console or Console()
        self._prompt_timeout = prompt_timeout

    @property
    def session(self) -> ConsentSession:
        return self._session

    async def check_permission(
        self,
        command: str,
        args: list[str],
        risk: Classification,
        prompter: Prompter | None = None,
        bypass: bool = False,
    ) -> PermissionDecision:
        if risk.level == RiskLevel.BLOCKED:
            # Callers refuse blocked commands before reaching the gate.
            logger.warning("Permission gate consulted for blocked command '%s'", command)
            return _decision(False, ReasonCode.DENIED)

        if bypass:
            return _decision(True, ReasonCode.SKIP_ENABLED)

        if self._session.is_always_allowed(command):
            return _decision(True, ReasonCode.ALWAYS_ALLOWED)

        if self._session.is_always_denied(command):
            return _decision(False, ReasonCode.ALWAYS_DENIED)

        decision = await self._prompt_user(command, args, risk, prompter)
        logger.info(
            "Permission for '%s': %s (%s)",
            command,
            "allowed" if decision.allowed else "denied",
            decision.reason.value,
        )
        return decision

    async def _prompt_user(
        self,
        command: str,
        args: list[str],
        risk: Classification,
        prompter: Prompter | None,
    ) -> PermissionDecision:
        cmd_string = " ".join([command, *args])

        if prompter is None:
            self._console.print(Text.assemble("\n", ("● Permission Required", "yellow"), " ", cmd_string))
            self._console.print(
                "[red]✗ Denied[/] [dim]No interactive prompt available. "
                "Set SHELLGATE_SKIP_PERMISSIONS=true to allow.[/]"
            )
            return _decision(False, ReasonCode.NON_INTERACTIVE)

        self._render_request(cmd_string, risk)
        dangerous = risk.level == RiskLevel.DANGEROUS

        try:
            answer = await self._ask(prompter, DANGEROUS_PROMPT if dangerous else STANDARD_PROMPT)
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None:
                task.uncancel()
            self._console.print("[red]✗ Cancelled[/] Permission prompt was interrupted")
            return _decision(False, ReasonCode.PROMPT_ERROR)
        except Exception as exc:
            logger.warning("Prompt for '%s' failed: %s", command, exc)
            self._console.print(f"[red]✗ Error[/] Failed to get permission: {escape(str(exc))}")
            return _decision(False, ReasonCode.PROMPT_ERROR)

        normalized = _normalize(answer)

        # Dangerous commands have no "always" path; every run is re-confirmed.
        if dangerous:
            if normalized == "yes":
                return _decision(True, ReasonCode.EXPLICIT_YES)
            return _decision(False, ReasonCode.NOT_CONFIRMED)

        if normalized in _ONCE_ANSWERS:
            return _decision(True, ReasonCode.ONCE)

        if normalized in _ALWAYS_ANSWERS:
            self._session.record_always_allow(command)
            self._console.print(f"[green]✓[/] [dim]All '{escape(command)}' commands auto-approved this session[/]")
            return _decision(True, ReasonCode.ALWAYS_ALLOWED)

        if normalized in _DENY_ALWAYS_ANSWERS:
            self._session.record_always_deny(command)
            self._console.print(f"[red]✗[/] [dim]All '{escape(command)}' commands auto-denied this session[/]")
            return _decision(False, ReasonCode.ALWAYS_DENIED)

        return _decision(False, ReasonCode.DENIED)

    async def _ask(self, prompter: Prompter, text: str) -> str | None:
        if self._prompt_timeout is None:
            return await prompter(text)
        return await asyncio.wait_for(prompter(text), timeout=self._prompt_timeout)

    def _render_request(self, cmd_string: str, risk: Classification) -> None:
        limit = PANEL_WIDTH - 4
        display = cmd_string if len(cmd_string) <= limit else cmd_string[: limit - 3] + "..."

        self._console.print()
        if risk.level == RiskLevel.DANGEROUS:
            self._console.print("[bold red]DANGEROUS COMMAND[/]")
            self._console.print(Text(risk.reason or "", style="red"))
        elif risk.level == RiskLevel.CAUTION:
            self._console.print("[yellow]Caution[/]")
            self._console.print(Text(risk.reason or "", style="yellow"))

        border = "red" if risk.level == RiskLevel.DANGEROUS else "cyan"
        self._console.print(
            Panel(Text(display, style="cyan"), title="Shell", title_align="left", width=PANEL_WIDTH, border_style=border)
        )
