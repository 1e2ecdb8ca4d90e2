"""
Performance measurement utilities for timing provider fetches and refresh stages.
"""

import time
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class PerformanceTimer:
    """Simple performance timer for measuring processing stages."""

    def __init__(self, stage_name: str):
        self.stage_name = stage_name
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def start(self) -> None:
        self.start_time = time.perf_counter()
        logger.debug("stage_started", stage=self.stage_name)

    def stop(self) -> float:
        """Stop timing and return duration in seconds."""
        if self.start_time is None:
            raise ValueError("Timer not started")

        self.end_time = time.perf_counter()
        duration = self.end_time - self.start_time
        logger.debug("stage_completed", stage=self.stage_name, elapsed_ms=int(duration * 1000))
        return duration

    @property
    def elapsed_ms(self) -> int:
        """Milliseconds elapsed so far, or the final duration once stopped."""
        if self.start_time is None:
            raise ValueError("Timer not started")
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return int((end - self.start_time) * 1000)
