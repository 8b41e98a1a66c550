"""Audit trail for workflow and payroll operations.

Every state-changing operation reports who did what to which entity and how it
ended. The default sink writes to the ``payroll_system.audit`` logger; tests
use ``InMemoryAuditLog``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional, Protocol

from .datetime_utils import now_local

SUCCESS = "success"
FAILURE = "failure"


@dataclass(frozen=True)
class AuditEvent:
    component: str
    action: str
    actor_id: Optional[int]
    outcome: str
    subject_id: Optional[int] = None
    message: str = ""
    timestamp: datetime = field(default_factory=now_local)


class AuditLog(Protocol):
    def record(self, event: AuditEvent) -> None:
        raise NotImplementedError


class LoggingAuditLog:
    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("payroll_system.audit")

    def record(self, event: AuditEvent) -> None:
        level = logging.INFO if event.outcome == SUCCESS else logging.WARNING
        fields = asdict(event)
        # "message" is reserved on LogRecord
        fields["detail"] = fields.pop("message")
        self._logger.log(level, "%s.%s %s", event.component, event.action, event.outcome, extra=fields)


class InMemoryAuditLog:
    def __init__(self):
        self.events: list[AuditEvent] = []

    def record(self, event: AuditEvent) -> None:
        self.events.append(event)

    def actions(self, *, outcome: str | None = None) -> list[str]:
        return [
            f"{e.component}.{e.action}"
            for e in self.events
            if outcome is None or e.outcome == outcome
        ]
