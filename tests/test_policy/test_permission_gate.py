"""Tests for the permission gate."""

from __future__ import annotations

import asyncio

import pytest

from shellgate.models.permission import ReasonCode
from shellgate.models.risk import Classification, RiskLevel
from shellgate.policy.permission_gate import DANGEROUS_PROMPT, STANDARD_PROMPT, PermissionGate
from shellgate.policy.rules import DANGEROUS_COMMANDS


def _risk(level: RiskLevel, command: str = "ls", reason: str | None = None) -> Classification:
    return Classification(level=level, reason=reason, command=command)


NORMAL = _risk(RiskLevel.NORMAL)
CAUTION = _risk(RiskLevel.CAUTION, "mv", "'mv' modifies files")


class TestBypassAndLedger:
    @pytest.mark.asyncio
    async def test_bypass_allows_without_prompt(self, gate, make_prompter):
        prompter = make_prompter("n")
        decision = await gate.check_permission("ls", [], NORMAL, prompter=prompter, bypass=True)
        assert decision.allowed is True
        assert decision.reason == ReasonCode.SKIP_ENABLED
        prompter.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bypass_never_allows_blocked(self, gate):
        risk = _risk(RiskLevel.BLOCKED, "mkfs", "Command 'mkfs' is blocked for safety")
        decision = await gate.check_permission("mkfs", [], risk, bypass=True)
        assert decision.allowed is False

    @pytest.mark.asyncio
    async def test_always_allowed_skips_prompt(self, gate, session, make_prompter):
        session.record_always_allow("ls")
        prompter = make_prompter("n")
        decision = await gate.check_permission("ls", ["-la"], NORMAL, prompter=prompter)
        assert decision.allowed is True
        assert decision.reason == ReasonCode.ALWAYS_ALLOWED
        prompter.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_always_denied_skips_prompt(self, gate, session, make_prompter):
        session.record_always_deny("ls")
        prompter = make_prompter("y")
        decision = await gate.check_permission("ls", [], NORMAL, prompter=prompter)
        assert decision.allowed is False
        assert decision.reason == ReasonCode.ALWAYS_DENIED
        prompter.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_always_answer_then_other_command_still_prompts(self, gate, make_prompter):
        first = make_prompter("a")
        decision = await gate.check_permission("ls", [], NORMAL, prompter=first)
        assert decision.reason == ReasonCode.ALWAYS_ALLOWED

        second = make_prompter("y")
        again = await gate.check_permission("ls", ["/tmp"], NORMAL, prompter=second)
        assert again.reason == ReasonCode.ALWAYS_ALLOWED
        second.assert_not_awaited()

        third = make_prompter("y")
        other = await gate.check_permission("cat", ["f"], _risk(RiskLevel.NORMAL, "cat"), prompter=third)
        assert other.reason == ReasonCode.ONCE
        third.assert_awaited_once()


class TestNonInteractive:
    @pytest.mark.asyncio
    async def test_no_prompter_denies(self, gate, console_buffer):
        decision = await gate.check_permission("ls", [], NORMAL, prompter=None)
        assert decision.allowed is False
        assert decision.reason == ReasonCode.NON_INTERACTIVE
        assert "SHELLGATE_SKIP_PERMISSIONS" in decision.message
        assert "Permission Required" in console_buffer.getvalue()

    @pytest.mark.asyncio
    async def test_empty_answer_is_not_non_interactive(self, gate, make_prompter):
        decision = await gate.check_permission("ls", [], NORMAL, prompter=make_prompter(""))
        assert decision.reason == ReasonCode.DENIED


class TestStandardTier:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["y", "yes", " Y ", "YES"])
    async def test_once(self, gate, session, make_prompter, answer):
        decision = await gate.check_permission("mv", ["a", "b"], CAUTION, prompter=make_prompter(answer))
        assert decision.allowed is True
        assert decision.reason == ReasonCode.ONCE
        assert session.is_always_allowed("mv") is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["a", "all", "always", "Always"])
    async def test_always(self, gate, session, make_prompter, answer):
        decision = await gate.check_permission("mv", [], CAUTION, prompter=make_prompter(answer))
        assert decision.allowed is True
        assert decision.reason == ReasonCode.ALWAYS_ALLOWED
        assert session.is_always_allowed("mv") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["d", "deny"])
    async def test_deny_always(self, gate, session, make_prompter, answer):
        decision = await gate.check_permission("mv", [], CAUTION, prompter=make_prompter(answer))
        assert decision.allowed is False
        assert decision.reason == ReasonCode.ALWAYS_DENIED
        assert session.is_always_denied("mv") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["n", "no", "", None, "sure", "yess"])
    async def test_anything_else_denies(self, gate, session, make_prompter, answer):
        decision = await gate.check_permission("ls", [], NORMAL, prompter=make_prompter(answer))
        assert decision.allowed is False
        assert decision.reason == ReasonCode.DENIED
        assert session.snapshot().denied == []

    @pytest.mark.asyncio
    async def test_standard_prompt_text(self, gate, make_prompter):
        prompter = make_prompter("y")
        await gate.check_permission("ls", [], NORMAL, prompter=prompter)
        prompter.assert_awaited_once_with(STANDARD_PROMPT)

    @pytest.mark.asyncio
    async def test_caution_warning_rendered(self, gate, make_prompter, console_buffer):
        await gate.check_permission("mv", ["a", "b"], CAUTION, prompter=make_prompter("n"))
        output = console_buffer.getvalue()
        assert "Caution" in output
        assert "mv a b" in output


class TestDangerousTier:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", sorted(DANGEROUS_COMMANDS))
    async def test_only_literal_yes_confirms(self, gate, make_prompter, command):
        risk = _risk(RiskLevel.DANGEROUS, command, "danger")
        decision = await gate.check_permission(command, ["x"], risk, prompter=make_prompter("  YES "))
        assert decision.allowed is True
        assert decision.reason == ReasonCode.EXPLICIT_YES

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["y", "Yes please", "", "a", "always", None])
    async def test_other_answers_not_confirmed(self, gate, session, make_prompter, answer):
        risk = _risk(RiskLevel.DANGEROUS, "rm", "'rm' can permanently modify or delete data")
        decision = await gate.check_permission("rm", ["f"], risk, prompter=make_prompter(answer))
        assert decision.allowed is False
        assert decision.reason == ReasonCode.NOT_CONFIRMED
        assert session.is_always_allowed("rm") is False

    @pytest.mark.asyncio
    async def test_yes_is_one_time(self, gate, make_prompter):
        risk = _risk(RiskLevel.DANGEROUS, "rm", "danger")
        await gate.check_permission("rm", ["f"], risk, prompter=make_prompter("yes"))
        prompter = make_prompter("no")
        decision = await gate.check_permission("rm", ["f"], risk, prompter=prompter)
        prompter.assert_awaited_once_with(DANGEROUS_PROMPT)
        assert decision.reason == ReasonCode.NOT_CONFIRMED

    @pytest.mark.asyncio
    async def test_dangerous_banner(self, gate, make_prompter, console_buffer):
        risk = _risk(RiskLevel.DANGEROUS, "rm", "'rm' can permanently modify or delete data")
        await gate.check_permission("rm", ["f"], risk, prompter=make_prompter("no"))
        output = console_buffer.getvalue()
        assert "DANGEROUS COMMAND" in output
        assert "permanently" in output


class TestPromptFailures:
    @pytest.mark.asyncio
    async def test_prompter_error_denies(self, gate, make_prompter):
        prompter = make_prompter(side_effect=RuntimeError("tty gone"))
        decision = await gate.check_permission("ls", [], NORMAL, prompter=prompter)
        assert decision.allowed is False
        assert decision.reason == ReasonCode.PROMPT_ERROR

    @pytest.mark.asyncio
    async def test_prompter_error_on_dangerous_denies(self, gate, make_prompter):
        prompter = make_prompter(side_effect=EOFError())
        risk = _risk(RiskLevel.DANGEROUS, "rm", "danger")
        decision = await gate.check_permission("rm", [], risk, prompter=prompter)
        assert decision.reason == ReasonCode.PROMPT_ERROR

    @pytest.mark.asyncio
    async def test_cancelled_prompt_denies(self, gate, make_prompter):
        prompter = make_prompter(side_effect=asyncio.CancelledError())
        decision = await gate.check_permission("ls", [], NORMAL, prompter=prompter)
        assert decision.allowed is False
        assert decision.reason == ReasonCode.PROMPT_ERROR

    @pytest.mark.asyncio
    async def test_cancelled_task_leaves_no_pending_cancel(self, gate):
        started = asyncio.Event()

        async def waiting(text: str) -> str:
            started.set()
            await asyncio.sleep(5)
            return "y"

        task = asyncio.create_task(gate.check_permission("ls", [], NORMAL, prompter=waiting))
        await started.wait()
        task.cancel()
        decision = await task
        assert decision.allowed is False
        assert decision.reason == ReasonCode.PROMPT_ERROR
        assert task.cancelling() == 0

    @pytest.mark.asyncio
    async def test_prompt_timeout_denies(self, session, quiet_console):
        gate = PermissionGate(session=session, console=quiet_console, prompt_timeout=0.05)

        async def slow(text: str) -> str:
            await asyncio.sleep(5)
            return "y"

        decision = await gate.check_permission("ls", [], NORMAL, prompter=slow)
        assert decision.allowed is False
        assert decision.reason == ReasonCode.PROMPT_ERROR

    @pytest.mark.asyncio
    async def test_long_command_truncated_in_panel(self, gate, make_prompter, console_buffer):
        args = ["x" * 200]
        await gate.check_permission("echo", args, _risk(RiskLevel.NORMAL, "echo"), prompter=make_prompter("n"))
        output = console_buffer.getvalue()
        assert "..." in output
        assert "x" * 200 not in output
