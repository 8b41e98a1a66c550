from __future__ import annotations

from typing import Optional, TypeVar

from ..core.enums import FailureReason
from ..core.exceptions import ValidationError

T = TypeVar("T")


def require_non_empty(value: Optional[str], field_name: str, *, reason: FailureReason | None = None) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", reason=reason)
    return value.strip()


def require_present(value: Optional[T], field_name: str) -> T:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    return value


def ranges_overlap(start1: T, end1: T, start2: T, end2: T) -> bool:
    """Inclusive overlap test; ranges that only touch at an endpoint overlap."""
    return not (end1 < start2 or start1 > end2)
