"""Render Budget - soft wall-clock budget tracked from request start."""

import time
from typing import Callable, Optional

from short_video_maker.core.errors import RenderTimeoutError


class RenderBudget:
    """Tracks elapsed time against a per-request budget."""

    def __init__(self, budget_seconds: float, clock: Optional[Callable[[], float]] = None):
        """
        Initialize the budget. The clock starts immediately.

        Args:
            budget_seconds: Wall-clock seconds available to the request
            clock: Monotonic clock (injectable for tests)
        """
        self.budget_seconds = budget_seconds
        self.clock = clock or time.monotonic
        self.started_at = self.clock()

    def elapsed(self) -> float:
        """Seconds since the request started."""
        return self.clock() - self.started_at

    def remaining(self) -> float:
        """Seconds left before the budget is exhausted."""
        return self.budget_seconds - self.elapsed()

    def check(self, stage: str = "admission") -> None:
        """
        Raise if the budget is exhausted.

        Args:
            stage: Where the check happens, used in the error message

        Raises:
            RenderTimeoutError: If no time remains
        """
        if self.remaining() <= 0:
            raise RenderTimeoutError(
                f"Render budget of {self.budget_seconds:.0f}s exhausted at {stage} "
                f"(elapsed {self.elapsed():.1f}s)"
            )
