"""Execution models: input and output of the safe executor."""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from shellgate.config.settings import DEFAULT_TIMEOUT_SECONDS
from shellgate.models.permission import ReasonCode


class ExecutionFailure(str, enum.Enum):
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    BUFFER_OVERFLOW = "buffer_overflow"
    NON_ZERO_EXIT = "non_zero_exit"


class DenialKind(str, enum.Enum):
    BLOCKED = "blocked"
    PERMISSION_DENIED = "permission_denied"


class ExecutionRequest(BaseModel):
    command: str
    args: list[str] = Field(default_factory=list)
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    working_dir: Path | None = None


class ExecutionOptions(BaseModel):
    timeout: float | None = Field(default=None, gt=0)
    working_dir: Path | None = None


class ExecutionResult(BaseModel):
    success: bool
    output: str | None = None
    error: str | None = None
    exit_code: int | None = None
    timed_out: bool = False
    failure: ExecutionFailure | None = None
    denied: Literal[False] = False


class DeniedResult(BaseModel):
    command: str
    kind: DenialKind
    reason: ReasonCode | None = None
    message: str
    success: Literal[False] = False
    denied: Literal[True] = True
