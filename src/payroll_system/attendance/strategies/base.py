from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time
from typing import Optional

from ...core.enums import TardinessType
from ..model import WorkSchedule


@dataclass(frozen=True)
class TardinessDecision:
    """What a time-in/time-out means: reported minutes and the record to emit, if any."""

    late_minutes: int = 0
    undertime_minutes: int = 0
    tardiness_type: Optional[TardinessType] = None
    note: Optional[str] = None

    @property
    def is_late(self) -> bool:
        return self.late_minutes > 0

    @property
    def tardiness_minutes(self) -> int:
        if self.tardiness_type == TardinessType.LATE:
            return self.late_minutes
        if self.tardiness_type == TardinessType.UNDERTIME:
            return self.undertime_minutes
        return 0


class TardinessStrategy(ABC):
    """Strategy Pattern: encapsulate how a clock event is classified."""

    @abstractmethod
    def decide_time_in(self, *, at: time, schedule: WorkSchedule) -> TardinessDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_time_out(self, *, at: time, schedule: WorkSchedule) -> TardinessDecision:
        raise NotImplementedError
