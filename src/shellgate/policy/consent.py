"""Session-scoped consent ledger."""

from __future__ import annotations

import logging
import threading

from shellgate.models.permission import ConsentState

logger = logging.getLogger(__name__)


class ConsentSession:
    """Remembers per-command "always allow" and "always deny" answers.

    Keys are command names only: allowing ``ls`` allows every later ``ls``
    invocation, whatever its arguments. The ledger lives in process memory
    and is never written to disk. A name is never in both sets.
    """

    def __init__(self) -> None:
        self._allowed: set[str] = set()
        self._denied: set[str] = set()
        self._lock = threading.Lock()

    def is_always_allowed(self, name: str) -> bool:
        return name in self._allowed

    def is_always_denied(self, name: str) -> bool:
        return name in self._denied

    def record_always_allow(self, name: str) -> None:
        with self._lock:
            self._denied.discard(name)
            self._allowed.add(name)
        logger.info("Always allowing '%s' for this session", name)

    def record_always_deny(self, name: str) -> None:
        with self._lock:
            self._allowed.discard(name)
            self._denied.add(name)
        logger.info("Always denying '%s' for this session", name)

    def reset(self) -> None:
        with self._lock:
            self._allowed.clear()
            self._denied.clear()
        logger.debug("Consent ledger cleared")

    def snapshot(self) -> ConsentState:
        with self._lock:
            return ConsentState(allowed=sorted(self._allowed), denied=sorted(self._denied))
