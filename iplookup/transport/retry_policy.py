"""Backoff policy for the STUN retry engine.

Each attempt re-sends the request and then waits for a receive window that
grows exponentially with the attempt number.
"""

from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 5
LEGACY_MAX_ATTEMPTS = 4


@dataclass(frozen=True)
class BackoffPolicy:
    """Configurable receive backoff for one transaction."""
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_timeout: float = 1.0
    backoff_factor: float = 2.0
    send_timeout: float = 1.0

    def get_timeout(self, attempt: int) -> float:
        """Receive window for a given attempt (0-indexed).

        Args:
            attempt: Current attempt number (0 = first send).

        Returns:
            Seconds to wait for a response before re-sending.
        """
        return self.initial_timeout * (self.backoff_factor ** attempt)

    def get_timeout_ms(self, attempt: int) -> int:
        return int(round(self.get_timeout(attempt) * 1000))

    def schedule(self) -> list[float]:
        """All receive windows, in order."""
        return [self.get_timeout(k) for k in range(self.max_attempts)]

    @property
    def total_wait(self) -> float:
        """Worst-case time spent waiting for responses."""
        return sum(self.schedule())


@dataclass(frozen=True)
class RetryState:
    """An attempt whose receive window elapsed."""
    attempt: int
    timeout: float

    @property
    def timeout_ms(self) -> int:
        return int(round(self.timeout * 1000))


def default_backoff_policy() -> BackoffPolicy:
    """Create default backoff policy.

    5 attempts, 1s initial window, 2x backoff (1+2+4+8+16 = 31s total).
    """
    return BackoffPolicy()


def legacy_backoff_policy() -> BackoffPolicy:
    """Create the older 4-attempt policy (15s total)."""
    return BackoffPolicy(max_attempts=LEGACY_MAX_ATTEMPTS)

