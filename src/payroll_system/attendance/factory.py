from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .model import WorkSchedule
from .strategies.base import TardinessStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.undertime_strategy import UndertimeStrategy


@dataclass
class TardinessStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_time_in(self, *, at: time, schedule: WorkSchedule) -> TardinessStrategy:
        if schedule.late_minutes(at) > schedule.grace_minutes:
            return LateStrategy()
        return NormalStrategy()

    def for_time_out(self, *, at: time, schedule: WorkSchedule) -> TardinessStrategy:
        if schedule.undertime_minutes(at) > 0:
            return UndertimeStrategy()
        return NormalStrategy()
