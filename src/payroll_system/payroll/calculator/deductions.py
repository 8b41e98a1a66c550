"""Statutory contributions and progressive withholding tax.

Both tables are configuration: they are validated once, when the settings are
loaded, and the engine only evaluates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ...common.money import ZERO, round_money, to_decimal, total
from ...core import constants
from ...core.exceptions import ConfigurationError


@dataclass(frozen=True)
class TaxBracket:
    """Half-open income range [lower, upper) taxed as (income - lower) * rate + base."""

    lower: Decimal
    upper: Optional[Decimal]
    rate: Decimal
    base: Decimal

    def contains(self, amount: Decimal) -> bool:
        return self.lower <= amount and (self.upper is None or amount < self.upper)

    def tax_for(self, amount: Decimal) -> Decimal:
        return (amount - self.lower) * self.rate + self.base


@dataclass(frozen=True)
class StatutoryContribution:
    name: str
    rate: Decimal
    cap: Optional[Decimal] = None

    def amount_for(self, basic_salary: Decimal) -> Decimal:
        amount = round_money(basic_salary * self.rate)
        if self.cap is not None and amount > self.cap:
            return self.cap
        return amount


@dataclass(frozen=True)
class DeductionBreakdown:
    contributions: dict[str, Decimal]
    withholding_tax: Decimal

    @property
    def total_contributions(self) -> Decimal:
        return total(self.contributions.values())

    @property
    def total(self) -> Decimal:
        return self.total_contributions + self.withholding_tax


def _bracket(row) -> TaxBracket:
    if isinstance(row, TaxBracket):
        return row
    try:
        lower, upper, rate, base = row
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Tax bracket must be (min, max, rate, base), got {row!r}") from e
    return TaxBracket(
        lower=to_decimal(lower),
        upper=None if upper is None else to_decimal(upper),
        rate=to_decimal(rate),
        base=to_decimal(base),
    )


def build_tax_table(rows: Iterable) -> tuple[TaxBracket, ...]:
    """Validate a bracket table: starts at 0, contiguous, ordered, open-ended last bracket."""
    table = tuple(_bracket(r) for r in rows)
    if not table:
        raise ConfigurationError("Tax bracket table is empty")
    if table[0].lower != 0:
        raise ConfigurationError("First tax bracket must start at 0")

    for prev, nxt in zip(table, table[1:]):
        if prev.upper is None:
            raise ConfigurationError("Only the last tax bracket may be open-ended")
        if prev.upper <= prev.lower:
            raise ConfigurationError(f"Tax bracket starting at {prev.lower} is empty")
        if nxt.lower != prev.upper:
            raise ConfigurationError(f"Gap or overlap between tax brackets at {prev.upper}")

    if table[-1].upper is not None:
        raise ConfigurationError("Last tax bracket must be open-ended")

    for b in table:
        if not (0 <= b.rate <= 1) or b.base < 0:
            raise ConfigurationError(f"Invalid rate/base in tax bracket starting at {b.lower}")
    return table


def build_contributions(rows: Iterable) -> tuple[StatutoryContribution, ...]:
    out = []
    for row in rows:
        if isinstance(row, StatutoryContribution):
            out.append(row)
            continue
        try:
            name, rate, cap = row
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Contribution must be (name, rate, cap), got {row!r}") from e
        c = StatutoryContribution(str(name), to_decimal(rate), None if cap is None else to_decimal(cap))
        if c.rate < 0 or (c.cap is not None and c.cap < 0):
            raise ConfigurationError(f"Invalid contribution {c.name}")
        out.append(c)
    return tuple(out)


class DeductionEngine:
    def __init__(
        self,
        *,
        tax_brackets: Sequence[TaxBracket] | None = None,
        contributions: Sequence[StatutoryContribution] | None = None,
    ):
        self._brackets = build_tax_table(tax_brackets if tax_brackets is not None else constants.TAX_BRACKETS)
        self._contributions = build_contributions(
            contributions if contributions is not None else constants.STATUTORY_CONTRIBUTIONS
        )

    @property
    def tax_brackets(self) -> tuple[TaxBracket, ...]:
        return self._brackets

    def withholding_tax(self, gross_income: Decimal) -> Decimal:
        gross = to_decimal(gross_income)
        if gross <= 0:
            return ZERO
        for bracket in self._brackets:
            if bracket.contains(gross):
                return round_money(bracket.tax_for(gross))
        # unreachable for a validated table
        return ZERO

    def statutory_contributions(self, basic_salary: Decimal) -> dict[str, Decimal]:
        basic = to_decimal(basic_salary)
        return {c.name: c.amount_for(basic) for c in self._contributions}

    def breakdown(self, basic_salary: Decimal, gross_income: Decimal) -> DeductionBreakdown:
        return DeductionBreakdown(
            contributions=self.statutory_contributions(basic_salary),
            withholding_tax=self.withholding_tax(gross_income),
        )

    def total_deductions(self, basic_salary: Decimal, gross_income: Decimal) -> Decimal:
        return self.breakdown(basic_salary, gross_income).total
