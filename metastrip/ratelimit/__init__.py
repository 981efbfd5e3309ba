from metastrip.ratelimit.limiter import Operation, RateLimiters, SlidingWindowLimiter
from metastrip.ratelimit.window import RateWindow

__all__ = ["Operation", "RateLimiters", "RateWindow", "SlidingWindowLimiter"]
