"""Custom exception hierarchy for shellgate.

None of these cross the public ``run_gated`` boundary; they are raised and
converted into result data inside the package.
"""

from __future__ import annotations


class ShellGateError(Exception):
    """Base exception for all shellgate errors."""


class PromptError(ShellGateError):
    """Raised when the interactive prompter cannot produce an answer."""


class ExecutionError(ShellGateError):
    """Raised when a command cannot be started or supervised."""

    def __init__(self, message: str, command: str = "") -> None:
        super().__init__(message)
        self.command = command


class OutputLimitExceeded(ExecutionError):
    """Raised when a process writes more than the configured byte ceiling."""

    def __init__(self, limit: int, command: str = "") -> None:
        super().__init__(f"Output exceeded {limit} bytes", command=command)
        self.limit = limit
