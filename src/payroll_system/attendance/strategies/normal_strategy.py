from __future__ import annotations

from datetime import time

from ..model import WorkSchedule
from .base import TardinessDecision, TardinessStrategy


class NormalStrategy(TardinessStrategy):
    """No tardiness record. Lateness within the grace period is still reported."""

    def decide_time_in(self, *, at: time, schedule: WorkSchedule) -> TardinessDecision:
        return TardinessDecision(late_minutes=schedule.late_minutes(at))

    def decide_time_out(self, *, at: time, schedule: WorkSchedule) -> TardinessDecision:
        return TardinessDecision(undertime_minutes=schedule.undertime_minutes(at))
