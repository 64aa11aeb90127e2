# core/polling.py
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar
from util.errors import NotReadyError, TimeoutExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Sleeper = Callable[[float], None]


@dataclass
class Deadline:
    """
    Monotonic wall-clock budget. Phases carve sub-deadlines out of it so that
    no phase can outlive the overall budget.
    """

    budget: float
    clock: Clock = time.monotonic
    started: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.started = self.clock()

    @property
    def expires_at(self) -> float:
        return self.started + self.budget

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self.clock())

    def expired(self) -> bool:
        return self.clock() >= self.expires_at

    def child(self, share: float) -> "Deadline":
        """A sub-deadline of `share` x budget, capped at what is left here."""
        return Deadline(min(self.budget * share, self.remaining()), clock=self.clock)


def poll_until(
    condition: Callable[[], bool],
    *,
    deadline: Deadline,
    interval: float,
    sleep: Sleeper = time.sleep,
    what: str = "condition",
) -> int:
    """
    Evaluate `condition` every `interval` seconds until it is true.
    Returns the number of attempts; raises TimeoutExceededError once the
    deadline passes without success.
    """
    attempts = 0
    while True:
        attempts += 1
        if condition():
            return attempts
        if deadline.expired():
            break
        sleep(min(interval, deadline.remaining()))
    logger.warning("poll.timeout what=%s attempts=%d budget=%.2fs", what, attempts, deadline.budget)
    raise TimeoutExceededError(f"Timed out waiting for {what} after {deadline.budget:.2f}s")


def retry_not_ready(
    action: Callable[[], T],
    *,
    max_attempts: int,
    delay: float,
    sleep: Sleeper = time.sleep,
    what: Optional[str] = None,
) -> T:
    """
    Run `action`, retrying only on NotReadyError, at most `max_attempts` times.
    Any other error propagates on the first occurrence.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    last: Optional[NotReadyError] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return action()
        except NotReadyError as e:
            last = e
            logger.debug("not_ready.retry what=%s attempt=%d", what, attempt)
            if attempt < max_attempts:
                sleep(delay)
    raise TimeoutExceededError(
        f"{what or 'resource'} still not ready after {max_attempts} attempts"
    ) from last
