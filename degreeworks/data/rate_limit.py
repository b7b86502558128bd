"""
Request pacing.

DegreeWorks rate-limits per session, and once it starts rejecting requests
the rest of the run degrades with it. Every call to the audit API goes
through one RateLimiter so the delay is enforced in one place.
"""

import time


class RateLimiter:
    """
    Enforces a fixed pause after every call.

    acquire() blocks until `delay` seconds have passed since the previous
    release(). The pause follows every call, including ones that raised.

    Usage:
        limiter = RateLimiter(1.0)
        with limiter:
            session.post(...)
    """

    def __init__(self, delay: float, clock=time.monotonic, sleep=time.sleep):
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        self.delay = delay
        self._clock = clock
        self._sleep = sleep
        self._ready_at = None  # None means no call has been made yet

    def acquire(self) -> None:
        if self._ready_at is None:
            return
        remaining = self._ready_at - self._clock()
        if remaining > 0:
            self._sleep(remaining)

    def release(self) -> None:
        self._ready_at = self._clock() + self.delay

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
