from __future__ import annotations

from decimal import Decimal

import pytest

from payroll_system.core.exceptions import ConfigurationError
from payroll_system.payroll.calculator.deductions import DeductionEngine, build_contributions, build_tax_table


@pytest.mark.parametrize(
    "gross, expected",
    [
        ("0", "0.00"),
        ("-10", "0.00"),
        ("20832.99", "0.00"),
        # at a bracket floor only the base applies
        ("20833", "0.00"),
        ("33333", "2500.00"),
        ("40000", "4166.75"),
        ("700000", "212499.88"),
    ],
)
def test_withholding_tax(gross, expected):
    assert DeductionEngine().withholding_tax(Decimal(gross)) == Decimal(expected)


def test_contributions_apply_cap():
    contributions = DeductionEngine().statutory_contributions(Decimal("30000.00"))

    assert contributions == {
        "retirement": Decimal("1350.00"),
        "health": Decimal("825.00"),
        "housing": Decimal("200.00"),
    }


def test_breakdown_totals():
    breakdown = DeductionEngine().breakdown(Decimal("30000.00"), Decimal("21000.00"))

    assert breakdown.total_contributions == Decimal("2375.00")
    assert breakdown.withholding_tax == Decimal("33.40")
    assert breakdown.total == Decimal("2408.40")


def test_custom_tables():
    engine = DeductionEngine(
        tax_brackets=[(0, 1000, 0, 0), (1000, None, "0.10", 0)],
        contributions=[("pension", "0.05", None)],
    )

    assert engine.total_deductions(Decimal("2000"), Decimal("1500")) == Decimal("150.00")


@pytest.mark.parametrize(
    "rows",
    [
        [],
        [(100, None, 0, 0)],
        [(0, 1000, 0, 0), (1200, None, "0.1", 0)],
        [(0, 1000, 0, 0), (900, None, "0.1", 0)],
        [(0, None, 0, 0), (1000, None, "0.1", 0)],
        [(0, 1000, 0, 0), (1000, 2000, "0.1", 0)],
        [(0, 1000, 0, 0), (1000, None, "1.5", 0)],
        [(0, 1000, 0, 0), (1000, None, "0.1", -5)],
        [(0, 1000, 0)],
    ],
)
def test_invalid_tax_tables_are_rejected(rows):
    with pytest.raises(ConfigurationError):
        build_tax_table(rows)


def test_negative_contribution_rate_is_rejected():
    with pytest.raises(ConfigurationError):
        build_contributions([("pension", "-0.01", None)])
