"""Timing utilities."""

import time
from typing import Optional
from contextlib import contextmanager


class Timer:
    """Wall-clock timer for a generation step."""

    def __init__(self, name: str = ""):
        self.name = name
        self.start_time: Optional[float] = None
        self.elapsed: float = 0.0

    def start(self):
        self.start_time = time.perf_counter()

    def stop(self) -> float:
        """Stop the timer and return elapsed seconds."""
        if self.start_time is None:
            return 0.0
        self.elapsed = time.perf_counter() - self.start_time
        self.start_time = None
        return self.elapsed

    @contextmanager
    def measure(self):
        """Time the enclosed block, also when it raises."""
        self.start()
        try:
            yield self
        finally:
            self.stop()

    def rate(self, count: int) -> float:
        """Items per second over the last measured interval."""
        if self.elapsed <= 0:
            return 0.0
        return count / self.elapsed
