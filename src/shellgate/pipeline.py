"""Gated pipeline: wires classify → permission gate → safe executor."""

from __future__ import annotations

import logging

from shellgate.config.settings import Settings
from shellgate.executor.safe_executor import SafeExecutor
from shellgate.models.execution import (
    DenialKind,
    DeniedResult,
    ExecutionFailure,
    ExecutionOptions,
    ExecutionRequest,
    ExecutionResult,
)
from shellgate.models.risk import RiskLevel
from shellgate.policy.classifier import classify
from shellgate.policy.permission_gate import PermissionGate, Prompter

logger = logging.getLogger(__name__)


class GatedPipeline:
    def __init__(
        self,
        gate: PermissionGate,
        executor: SafeExecutor,
        settings: Settings,
    ) -> None:
        self._gate = gate
        self._executor = executor
        self._settings = settings

    @property
    def gate(self) -> PermissionGate:
        return self._gate

    async def run_gated(
        self,
        command: str,
        args: list[str],
        raw_line: str | None = None,
        prompter: Prompter | None = None,
        bypass: bool = False,
        options: ExecutionOptions | None = None,
    ) -> ExecutionResult | DeniedResult:
        """Classify, ask for consent, then execute.

        Never raises: blocked commands and refusals come back as a
        ``DeniedResult``, and unexpected faults as a failed
        ``ExecutionResult``.
        """
        try:
            return await self._run(command, args, raw_line, prompter, bypass, options)
        except Exception as exc:
            logger.exception("Unexpected failure while running %r", command)
            return ExecutionResult(
                success=False,
                error=str(exc) or exc.__class__.__name__,
                failure=ExecutionFailure.NON_ZERO_EXIT,
            )

    async def _run(
        self,
        command: str,
        args: list[str],
        raw_line: str | None,
        prompter: Prompter | None,
        bypass: bool,
        options: ExecutionOptions | None,
    ) -> ExecutionResult | DeniedResult:
        # 1. Classify before anything else; blocked never reaches the gate.
        line = raw_line if raw_line is not None else " ".join([command, *args])
        risk = classify(command, args, line)

        if risk.level == RiskLevel.BLOCKED:
            logger.warning("Blocked %r: %s", line, risk.reason)
            return DeniedResult(
                command=command,
                kind=DenialKind.BLOCKED,
                message=f"BLOCKED: {risk.reason}",
            )

        # 2. Consent
        decision = await self._gate.check_permission(
            command,
            args,
            risk,
            prompter=prompter,
            bypass=bypass or self._settings.skip_permissions,
        )
        if not decision.allowed:
            return DeniedResult(
                command=command,
                kind=DenialKind.PERMISSION_DENIED,
                reason=decision.reason,
                message=decision.message,
            )

        # 3. Execute
        options = options or ExecutionOptions()
        request = ExecutionRequest(
            command=command,
            args=args,
            timeout=options.timeout or self._settings.default_timeout,
            working_dir=options.working_dir,
        )
        return await self._executor.execute(request)
