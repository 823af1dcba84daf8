"""Risk models: output of the risk classifier."""

from __future__ import annotations

import enum

from pydantic import BaseModel


class RiskLevel(int, enum.Enum):
    NORMAL = 1
    CAUTION = 2
    DANGEROUS = 3
    BLOCKED = 4


class Classification(BaseModel):
    level: RiskLevel
    reason: str | None = None
    command: str
