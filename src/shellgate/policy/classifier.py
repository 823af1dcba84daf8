"""Risk classifier: maps a parsed command to a risk tier."""

from __future__ import annotations

import logging

from shellgate.models.risk import Classification, RiskLevel
from shellgate.policy.rules import RISK_RULES, RiskRule

logger = logging.getLogger(__name__)


def classify(
    command: str,
    args: list[str],
    raw_line: str,
    rules: tuple[RiskRule, ...] = RISK_RULES,
) -> Classification:
    """Classify a command by the first matching rule.

    Only the command name and the raw line are lower-cased; arguments are
    compared as given and never validated.
    """
    cmd = command.lower()
    line = raw_line.lower()

    for rule in rules:
        if rule.matches(cmd, args, line):
            logger.debug("Rule %s matched %r -> %s", rule.name, raw_line, rule.level.name)
            return Classification(level=rule.level, reason=rule.describe(cmd), command=cmd)

    return Classification(level=RiskLevel.NORMAL, reason=None, command=cmd)
