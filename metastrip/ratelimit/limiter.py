import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from metastrip.config.settings import Settings
from metastrip.logging.logger import Log
from metastrip.ratelimit.window import RateWindow


class Operation(str, Enum):
    """Remote operation classes, each with its own rate window."""

    INSPECT = "inspect"
    STRIP = "strip"


class SlidingWindowLimiter:
    """Holds a RateWindow and advances it against a clock."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "",
    ) -> None:
        self._window = RateWindow(max_requests=max_requests, window_seconds=window_seconds)
        self._clock = clock
        self._name = name or "limiter"

    @property
    def window(self) -> RateWindow:
        return self._window

    def admit(self) -> bool:
        """Admit and record one request, or deny without recording."""
        self._window, allowed = self._window.admit(self._clock())
        if allowed:
            Log.debug(
                f"[{self._name}] request allowed, "
                f"{len(self._window.timestamps)}/{self._window.max_requests} in window"
            )
        else:
            Log.debug(f"[{self._name}] rate limit reached ({self._window.max_requests} max)")
        return allowed

    def remaining(self) -> int:
        now = self._clock()
        self._window = self._window.pruned(now)
        return self._window.remaining(now)

    def retry_after_seconds(self) -> int:
        now = self._clock()
        self._window = self._window.pruned(now)
        return self._window.retry_after_seconds(now)

    def reset(self) -> None:
        """Forget every recorded request. Administrative use only."""
        self._window = self._window.cleared()


@dataclass
class RateLimiters:
    """The two independent limiters consulted by the orchestrator."""

    inspect: SlidingWindowLimiter
    strip: SlidingWindowLimiter

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ) -> "RateLimiters":
        return cls(
            inspect=SlidingWindowLimiter(
                settings.inspect_rate_limit_max_requests,
                settings.inspect_rate_limit_window_seconds,
                clock=clock,
                name="inspect",
            ),
            strip=SlidingWindowLimiter(
                settings.strip_rate_limit_max_requests,
                settings.strip_rate_limit_window_seconds,
                clock=clock,
                name="strip",
            ),
        )

    def for_operation(self, operation: Operation) -> SlidingWindowLimiter:
        if operation is Operation.INSPECT:
            return self.inspect
        return self.strip
