from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Type, TypeVar

from .enums import FailureReason
from .exceptions import DomainError

R = TypeVar("R", bound="OperationResult")


@dataclass(frozen=True)
class OperationResult:
    """Outcome returned by every public engine operation.

    Expected business failures are reported here instead of being raised;
    subclasses add the operation-specific payload (all fields defaulted).
    """

    success: bool = False
    message: str = ""
    reason: Optional[FailureReason] = None

    @classmethod
    def ok(cls: Type[R], message: str, **payload) -> R:
        return cls(success=True, message=message, **payload)

    @classmethod
    def failed(cls: Type[R], error: DomainError, **payload) -> R:
        return cls(success=False, message=str(error), reason=error.reason, **payload)
