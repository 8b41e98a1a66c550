from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ...common.money import ZERO, round_money, to_decimal, total
from ...core import constants
from ...requests.model import OvertimeRequest


class OvertimeCalculator:
    """Approved overtime window -> pay.

    Premiums are additive on top of the base multiplier: 1.5x base, +0.10x for
    a night-shift start, +0.30x for a weekend start (2.0x when both apply).
    """

    def __init__(
        self,
        *,
        base_multiplier: Decimal = constants.OVERTIME_BASE_MULTIPLIER,
        night_premium: Decimal = constants.NIGHT_SHIFT_PREMIUM,
        weekend_premium: Decimal = constants.WEEKEND_PREMIUM,
    ):
        self._base = base_multiplier
        self._night = night_premium
        self._weekend = weekend_premium

    def multiplier(self, request: OvertimeRequest) -> Decimal:
        m = self._base
        if request.is_night_shift:
            m += self._night
        if request.is_weekend:
            m += self._weekend
        return m

    def pay(self, request: OvertimeRequest, hourly_rate: Decimal) -> Decimal:
        rate = to_decimal(hourly_rate)
        hours = request.hours
        if rate <= 0 or hours <= 0:
            return ZERO
        return round_money(hours * rate * self.multiplier(request))

    def total_pay(self, requests: Iterable[OvertimeRequest], hourly_rate: Decimal) -> Decimal:
        return total(self.pay(r, hourly_rate) for r in requests)
