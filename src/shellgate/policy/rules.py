"""Ordered risk rule table.

Rules are evaluated top to bottom and the first match wins, so the order of
``RISK_RULES`` is the precedence of the classifier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from shellgate.models.risk import RiskLevel

# (command, args, line) -> bool. command and line are already lower-cased.
Predicate = Callable[[str, list[str], str], bool]

BLOCKED_COMMANDS = frozenset({"mkfs", "fdisk", "parted", "shred"})

DANGEROUS_COMMANDS = frozenset({
    "rm", "rmdir", "chmod", "chown", "chgrp",
    "kill", "pkill", "killall",
    "shutdown", "reboot", "halt",
    "userdel", "groupdel",
})

CAUTION_COMMANDS = frozenset({
    "mv", "cp", "truncate", "useradd", "groupadd", "usermod",
})

IN_PLACE_FLAGS = ("-i", "--in-place")


@dataclass(frozen=True)
class RiskRule:
    name: str
    level: RiskLevel
    reason: str
    predicate: Predicate

    def matches(self, command: str, args: list[str], line: str) -> bool:
        return self.predicate(command, args, line)

    def describe(self, command: str) -> str:
        return self.reason.format(command=command)


def line_matches(pattern: str) -> Predicate:
    compiled = re.compile(pattern)
    return lambda command, args, line: compiled.search(line) is not None


def command_in(names: frozenset[str]) -> Predicate:
    return lambda command, args, line: command in names


def has_arg(flag: str) -> Predicate:
    return lambda command, args, line: flag in args


BLOCKED_LINE_RULES: tuple[RiskRule, ...] = (
    RiskRule(
        "rm-root",
        RiskLevel.BLOCKED,
        "Recursive or forced delete of the root directory",
        line_matches(r"rm\s+(-[rf]+\s+)*/\s*$"),
    ),
    RiskRule(
        "rm-root-glob",
        RiskLevel.BLOCKED,
        "Recursive or forced delete of everything under /",
        line_matches(r"rm\s+(-[rf]+\s+)*/\*\s*$"),
    ),
    RiskRule(
        "fork-bomb",
        RiskLevel.BLOCKED,
        "Fork bomb",
        line_matches(r":\s*\(\s*\)\s*\{\s*:\s*\|\s*:\s*&\s*\}\s*;\s*:"),
    ),
    RiskRule(
        "dd-wipe",
        RiskLevel.BLOCKED,
        "dd reading from /dev/zero or /dev/random",
        line_matches(r"dd\s+.*if=/dev/(zero|random)"),
    ),
    RiskRule(
        "raw-disk-write",
        RiskLevel.BLOCKED,
        "Redirection into a raw disk device",
        line_matches(r">\s*/dev/sd[a-z]"),
    ),
    RiskRule(
        "chmod-777-root",
        RiskLevel.BLOCKED,
        "chmod 777 on the filesystem root",
        line_matches(r"chmod\s+777\s+/"),
    ),
)

RISK_RULES: tuple[RiskRule, ...] = (
    *BLOCKED_LINE_RULES,
    RiskRule(
        "blocked-command",
        RiskLevel.BLOCKED,
        "Command '{command}' is blocked for safety",
        command_in(BLOCKED_COMMANDS),
    ),
    RiskRule(
        "dangerous-command",
        RiskLevel.DANGEROUS,
        "'{command}' can permanently modify or delete data",
        command_in(DANGEROUS_COMMANDS),
    ),
    RiskRule(
        "caution-command",
        RiskLevel.CAUTION,
        "'{command}' modifies files",
        command_in(CAUTION_COMMANDS),
    ),
    *(
        RiskRule(
            f"in-place-flag{flag}",
            RiskLevel.CAUTION,
            f"Flag '{flag}' modifies files in-place",
            has_arg(flag),
        )
        for flag in IN_PLACE_FLAGS
    ),
    RiskRule(
        "output-redirect",
        RiskLevel.CAUTION,
        "Output redirection can overwrite files",
        line_matches(r">\s+"),
    ),
    RiskRule(
        "pipe-to-tee",
        RiskLevel.CAUTION,
        "Piping into tee writes files",
        line_matches(r"\|\s+tee"),
    ),
)
