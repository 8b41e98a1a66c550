from __future__ import annotations

from datetime import time

from ...core.enums import TardinessType
from ..model import WorkSchedule
from .base import TardinessDecision, TardinessStrategy


class LateStrategy(TardinessStrategy):
    """Time-in beyond the grace period."""

    def decide_time_in(self, *, at: time, schedule: WorkSchedule) -> TardinessDecision:
        return TardinessDecision(
            late_minutes=schedule.late_minutes(at),
            tardiness_type=TardinessType.LATE,
            note="Auto-generated late record",
        )

    def decide_time_out(self, *, at: time, schedule: WorkSchedule) -> TardinessDecision:
        return TardinessDecision(undertime_minutes=schedule.undertime_minutes(at))
