"""
Login Throttle

In-process brute-force protection for the login endpoint. Failures are
counted per (email, ip) inside a sliding window; reaching the limit locks
that pair out for a fixed period.
"""

import hashlib
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ThrottleStatus(BaseModel):
    is_blocked: bool
    retry_after_seconds: int
    remaining_attempts: int


@dataclass
class _AttemptState:
    failures: List[float] = field(default_factory=list)
    blocked_until: float = 0.0


class LoginThrottle:
    """
    Business Rules:
    - Keys are SHA-256 digests of "email|ip", emails are not kept in clear
    - Only failures inside the window count
    - A lockout outlives the window and clears itself when it expires
    - Only failures create entries; entries with no live failures and no
      lockout are dropped
    - State is per process; restarting the service forgets it
    """

    def __init__(
        self,
        window_seconds: int = 15 * 60,
        max_attempts: int = 8,
        lockout_seconds: int = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_seconds = window_seconds
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self.clock = clock
        self._attempts: Dict[str, _AttemptState] = {}

    @staticmethod
    def _key(email: str, ip_address: Optional[str]) -> str:
        raw = f"{email.lower()}|{ip_address or 'unknown'}"
        return hashlib.sha256(raw.encode()).hexdigest()

    def _prune(self, state: _AttemptState, now: float) -> bool:
        """Drop old failures and an expired lockout. True when nothing is left."""
        cutoff = now - self.window_seconds
        state.failures = [ts for ts in state.failures if ts >= cutoff]
        if state.blocked_until and state.blocked_until <= now:
            state.blocked_until = 0.0
            state.failures = []
        return not state.failures and not state.blocked_until

    def _forget_stale(self, now: float) -> None:
        stale = [key for key, state in self._attempts.items() if self._prune(state, now)]
        for key in stale:
            del self._attempts[key]

    def status(self, email: str, ip_address: Optional[str]) -> ThrottleStatus:
        """Read-only: never creates an entry for the pair"""
        key = self._key(email, ip_address)
        now = self.clock()
        state = self._attempts.get(key)
        if state is not None and self._prune(state, now):
            del self._attempts[key]
            state = None
        if state is None:
            return ThrottleStatus(
                is_blocked=False,
                retry_after_seconds=0,
                remaining_attempts=self.max_attempts,
            )

        is_blocked = state.blocked_until > now
        retry_after = math.ceil(state.blocked_until - now) if is_blocked else 0
        return ThrottleStatus(
            is_blocked=is_blocked,
            retry_after_seconds=max(retry_after, 0),
            remaining_attempts=max(self.max_attempts - len(state.failures), 0),
        )

    def record_failure(self, email: str, ip_address: Optional[str]) -> None:
        now = self.clock()
        self._forget_stale(now)
        state = self._attempts.setdefault(self._key(email, ip_address), _AttemptState())
        state.failures.append(now)
        if len(state.failures) >= self.max_attempts:
            state.blocked_until = now + self.lockout_seconds
            logger.warning(
                f"Login locked out for {self.lockout_seconds}s after "
                f"{len(state.failures)} failed attempts"
            )

    def clear(self, email: str, ip_address: Optional[str]) -> None:
        self._attempts.pop(self._key(email, ip_address), None)
