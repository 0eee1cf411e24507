"""Real-time rest countdown layered on top of the instantaneous REST action."""
from __future__ import annotations

import time
from typing import Callable

from reinforce_lab.domain.actions import Rest
from reinforce_lab.services.game_service import GameService


def format_as_mm_ss(seconds: int) -> str:
    safe = max(0, seconds)
    return f"{safe // 60:02d}:{safe % 60:02d}"


class RestCountdown:
    """Waits out the inn delay one tick at a time, then dispatches REST."""

    def __init__(
        self,
        delay_seconds: int,
        *,
        sleep: Callable[[float], None] = time.sleep,
        on_tick: Callable[[str], None] | None = None,
    ) -> None:
        self._delay_seconds = max(0, delay_seconds)
        self._sleep = sleep
        self._on_tick = on_tick

    def run(self, service: GameService) -> bool:
        """Return True when resting changed the state."""
        if not service.view().can_rest:
            return False
        for remaining in range(self._delay_seconds, 0, -1):
            if self._on_tick is not None:
                self._on_tick(format_as_mm_ss(remaining))
            self._sleep(1)
        return service.dispatch(Rest())
