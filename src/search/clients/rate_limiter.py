"""Sliding-window rate limiting for provider clients."""

import time
from collections import deque
from collections.abc import Callable


class RateLimiter:
    """Sliding-window rate limiter.

    Keeps the timestamps of recent requests and sleeps just long enough to
    stay within `requests_per_period` per `period_seconds`.

    Example:
        >>> limiter = RateLimiter(requests_per_period=60, period_seconds=60)
        >>> limiter.wait_if_needed()  # Blocks if the next request would exceed the limit
    """

    def __init__(
        self,
        requests_per_period: int,
        period_seconds: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize rate limiter.

        Args:
            requests_per_period: Maximum number of requests allowed per period
            period_seconds: Length of the window in seconds
            clock: Monotonic time source (injectable for tests)
            sleep: Sleep function (injectable for tests)
        """
        self.requests_per_period = requests_per_period
        self.period_seconds = period_seconds
        self.request_times: deque[float] = deque()
        self._clock = clock
        self._sleep = sleep

    def _expire(self, now: float) -> None:
        while self.request_times and self.request_times[0] <= now - self.period_seconds:
            self.request_times.popleft()

    def wait_if_needed(self) -> None:
        """Block until one more request fits in the window, then record it."""
        now = self._clock()
        self._expire(now)

        if len(self.request_times) >= self.requests_per_period:
            # Small buffer so the oldest request has surely left the window
            sleep_time = self.period_seconds - (now - self.request_times[0]) + 0.1
            if sleep_time > 0:
                self._sleep(sleep_time)
            now = self._clock()
            self._expire(now)

        self.request_times.append(now)

    def reset(self) -> None:
        """Forget all tracked requests."""
        self.request_times.clear()
