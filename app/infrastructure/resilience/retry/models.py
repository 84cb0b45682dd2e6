"""Retry engine state models."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class RetryState:
    """Bookkeeping for one ``execute`` call.

    Created when the call starts and owned by it; never shared between
    concurrent calls.

    Fields:
        attempt: Number of the attempt currently running (1-based, 0 before start)
        last_error: Most recent failure, if any
        total_attempts: Attempts made by this call
        success_count: Successful attempts (0 or 1)
        failure_count: Failed attempts
        cancelled: The backoff wait was interrupted by the cancel event
    """

    attempt: int = 0
    last_error: Optional[BaseException] = None
    total_attempts: int = 0
    success_count: int = 0
    failure_count: int = 0
    cancelled: bool = False

    @property
    def succeeded(self) -> bool:
        return self.success_count > 0


@dataclass(frozen=True)
class RetryInfo:
    """Read-only view derived from the last completed ``execute``.

    Fields:
        attempts_left: max_attempts minus the attempts made
        next_delay: Delay that would precede the next attempt (seconds)
        progress: Attempts made divided by max_attempts (0.0 to 1.0)
    """

    attempts_left: int
    next_delay: float
    progress: float


@dataclass
class RetryStats:
    """Cumulative counters across every ``execute`` of an engine."""

    total_attempts: int = 0
    success_count: int = 0
    failure_count: int = 0

    @property
    def success_rate(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.success_count / self.total_attempts

    def record(self, state: RetryState) -> None:
        self.total_attempts += state.total_attempts
        self.success_count += state.success_count
        self.failure_count += state.failure_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_attempts": self.total_attempts,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "success_rate": self.success_rate,
        }
