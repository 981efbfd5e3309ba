from dataclasses import dataclass
from enum import Enum


class OrchestratorState(str, Enum):
    EMPTY = "empty"
    SELECTED = "selected"
    INSPECTING = "inspecting"
    STRIPPING = "stripping"


@dataclass(frozen=True)
class RateLimitStatus:
    """Snapshot of one limiter, for display."""

    remaining: int
    retry_after_seconds: int
