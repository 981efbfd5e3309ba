"""Log-based sliding window used for client-side admission control."""

import math
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class RateWindow:
    """Immutable sliding-window state for one operation class.

    ``timestamps`` are kept oldest first. A timestamp stops counting once
    its age reaches ``window_seconds``. Every transition takes ``now``
    explicitly and returns a new window, so the admission law can be
    exercised without a real clock.
    """

    max_requests: int
    window_seconds: float
    timestamps: tuple[float, ...] = ()

    def pruned(self, now: float) -> "RateWindow":
        """Return the window with every expired timestamp dropped."""
        live = tuple(ts for ts in self.timestamps if now - ts < self.window_seconds)
        if len(live) == len(self.timestamps):
            return self
        return replace(self, timestamps=live)

    def admit(self, now: float) -> tuple["RateWindow", bool]:
        """Record ``now`` if a slot is free.

        Returns the updated window and whether the request was admitted.
        A denied request is not recorded.
        """
        window = self.pruned(now)
        if len(window.timestamps) >= window.max_requests:
            return window, False
        return replace(window, timestamps=(*window.timestamps, now)), True

    def remaining(self, now: float) -> int:
        return max(0, self.max_requests - len(self.pruned(now).timestamps))

    def retry_after_seconds(self, now: float) -> int:
        """Seconds until the oldest live timestamp leaves the window."""
        live = self.pruned(now).timestamps
        if not live:
            return 0
        return max(0, math.ceil(self.window_seconds - (now - live[0])))

    def cleared(self) -> "RateWindow":
        return replace(self, timestamps=())
