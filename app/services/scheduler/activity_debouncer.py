"""
Activity Debouncer

Collapses a high-frequency stream of editor activity signals into a single
last-activity timestamp. Any number of sources may call record_activity();
each call is constant time and immediately notifies the scheduler so an
armed ping is cancelled in the same step.
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from app.models.database.scheduler_state import SchedulerState
from app.utils.time import elapsed_ms, utcnow

logger = logging.getLogger(__name__)


class ActivityDebouncer:
    """Tracks last activity for one workspace's SchedulerState."""

    def __init__(
        self,
        state: SchedulerState,
        on_activity: Optional[Callable[[], None]] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._state = state
        self._on_activity = on_activity
        self._clock = clock
        self._signal_count = 0

    @property
    def signal_count(self) -> int:
        """Activity signals received since this session started."""
        return self._signal_count

    def record_activity(self) -> None:
        """Stamp activity now and signal the scheduler. Idempotent."""
        self._state.last_activity_at = self._clock()
        self._signal_count += 1
        if self._on_activity is not None:
            self._on_activity()

    def idle_ms(self, now: Optional[datetime] = None) -> int:
        """Milliseconds since the last activity signal."""
        return elapsed_ms(self._state.last_activity_at, now or self._clock())

    def is_idle(self, now: Optional[datetime] = None) -> bool:
        return self.idle_ms(now) >= self._state.idle_threshold_ms
