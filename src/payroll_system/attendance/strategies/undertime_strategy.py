from __future__ import annotations

from datetime import time

from ...core.enums import TardinessType
from ..model import WorkSchedule
from .base import TardinessDecision, TardinessStrategy


class UndertimeStrategy(TardinessStrategy):
    """Time-out before standard end. No grace period applies."""

    def decide_time_in(self, *, at: time, schedule: WorkSchedule) -> TardinessDecision:
        return TardinessDecision(late_minutes=schedule.late_minutes(at))

    def decide_time_out(self, *, at: time, schedule: WorkSchedule) -> TardinessDecision:
        return TardinessDecision(
            undertime_minutes=schedule.undertime_minutes(at),
            tardiness_type=TardinessType.UNDERTIME,
            note="Auto-generated undertime record",
        )
