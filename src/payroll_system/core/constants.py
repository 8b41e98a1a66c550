"""Constants and defaults.

Note: Keep business-rule numbers here to avoid magic numbers spread across code.
Settings modules may override the ones exposed through ``EngineSettings``.
"""

from datetime import time
from decimal import Decimal

# Attendance
STANDARD_START_TIME = time(8, 0)
STANDARD_END_TIME = time(17, 0)
LATE_GRACE_MINUTES = 15

# Leave
DEFAULT_ANNUAL_LEAVE_DAYS = 15
DEFAULT_SICK_LEAVE_DAYS = 10
LEAVE_MAX_ADVANCE_DAYS = 60
LEAVE_MAX_BACKDATE_DAYS = 1

# Overtime
OVERTIME_BASE_MULTIPLIER = Decimal("1.5")
NIGHT_SHIFT_PREMIUM = Decimal("0.10")
WEEKEND_PREMIUM = Decimal("0.30")
NIGHT_SHIFT_START_HOUR = 18
NIGHT_SHIFT_END_HOUR = 6
MIN_OVERTIME_MINUTES = 30
MAX_DAILY_OVERTIME_HOURS = 4
MAX_WEEKLY_OVERTIME_HOURS = 20

# Payroll
PAY_PERIODS_PER_MONTH = 2

# Withholding tax, monthly table: (min, max, rate, base). max=None means open-ended.
TAX_BRACKETS = (
    (Decimal("0"), Decimal("20833"), Decimal("0"), Decimal("0")),
    (Decimal("20833"), Decimal("33333"), Decimal("0.20"), Decimal("0")),
    (Decimal("33333"), Decimal("66667"), Decimal("0.25"), Decimal("2500.00")),
    (Decimal("66667"), Decimal("166667"), Decimal("0.30"), Decimal("10833.33")),
    (Decimal("166667"), Decimal("666667"), Decimal("0.32"), Decimal("40833.33")),
    (Decimal("666667"), None, Decimal("0.35"), Decimal("200833.33")),
)

# Employee-share statutory contributions on monthly basic salary:
# (name, rate, max contribution or None)
STATUTORY_CONTRIBUTIONS = (
    ("retirement", Decimal("0.045"), None),
    ("health", Decimal("0.0275"), None),
    ("housing", Decimal("0.02"), Decimal("200.00")),
)

DEFAULT_HISTORY_LIMIT = 30
