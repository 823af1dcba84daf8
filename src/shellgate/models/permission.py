"""Permission models: output of the permission gate."""

from __future__ import annotations

import enum

from pydantic import BaseModel

NON_INTERACTIVE_HINT = (
    "No interactive prompt available. Set SHELLGATE_SKIP_PERMISSIONS=true to allow."
)


class ReasonCode(str, enum.Enum):
    SKIP_ENABLED = "skip_enabled"
    ALWAYS_ALLOWED = "always_allowed"
    ALWAYS_DENIED = "always_denied"
    ONCE = "once"
    EXPLICIT_YES = "explicit_yes"
    NOT_CONFIRMED = "not_confirmed"
    NON_INTERACTIVE = "non_interactive"
    DENIED = "denied"
    PROMPT_ERROR = "prompt_error"


_MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.SKIP_ENABLED: "permission checks skipped",
    ReasonCode.ALWAYS_ALLOWED: "always allowed for this session",
    ReasonCode.ALWAYS_DENIED: "always denied for this session",
    ReasonCode.ONCE: "allowed once",
    ReasonCode.EXPLICIT_YES: "confirmed with explicit yes",
    ReasonCode.NOT_CONFIRMED: "not confirmed",
    ReasonCode.NON_INTERACTIVE: NON_INTERACTIVE_HINT,
    ReasonCode.DENIED: "denied by user",
    ReasonCode.PROMPT_ERROR: "failed to get permission",
}


def describe_reason(reason: ReasonCode) -> str:
    return _MESSAGES[reason]


class PermissionDecision(BaseModel):
    allowed: bool
    reason: ReasonCode

    @property
    def message(self) -> str:
        return describe_reason(self.reason)


class ConsentState(BaseModel):
    allowed: list[str]
    denied: list[str]
