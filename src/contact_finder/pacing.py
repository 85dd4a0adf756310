"""Delay policy shared by the search and page passes."""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from dataclasses import dataclass

SleepFn = Callable[[float], None]


@dataclass(frozen=True)
class PacingPolicy:
    """Fixed pauses between provider calls, with optional random jitter.

    Tests pass ``sleep_fn`` to record pauses instead of sleeping.
    """

    query_delay: float = 1.0
    path_delay: float = 1.0
    lead_delay: float = 2.0
    jitter: float = 0.0
    sleep_fn: SleepFn = time.sleep

    def _pause(self, seconds: float) -> None:
        if seconds <= 0 and self.jitter <= 0:
            return
        self.sleep_fn(seconds + random.uniform(0.0, self.jitter))

    def between_queries(self) -> None:
        self._pause(self.query_delay)

    def between_paths(self) -> None:
        self._pause(self.path_delay)

    def between_leads(self) -> None:
        self._pause(self.lead_delay)


def no_pacing() -> PacingPolicy:
    """Return a policy that never sleeps."""
    return PacingPolicy(query_delay=0.0, path_delay=0.0, lead_delay=0.0, sleep_fn=lambda _s: None)
