from __future__ import annotations

import importlib
import os
from dataclasses import dataclass
from datetime import datetime, time
from types import ModuleType

from dotenv import load_dotenv

from ..core import constants
from ..core.exceptions import ConfigurationError
from ..database.connection import DBConfig
from ..payroll.calculator.deductions import (
    StatutoryContribution,
    TaxBracket,
    build_contributions,
    build_tax_table,
)


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "payroll_system.config.production"

    if env in {"test", "testing"}:
        return "payroll_system.config.testing"

    return "payroll_system.config.development"


@dataclass(frozen=True)
class EngineSettings:
    """Settings handed to the container; every component gets its slice at construction."""

    db_config: DBConfig
    debug: bool = False
    auto_init_db: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    standard_start_time: time = constants.STANDARD_START_TIME
    standard_end_time: time = constants.STANDARD_END_TIME
    late_grace_minutes: int = constants.LATE_GRACE_MINUTES

    leave_max_advance_days: int = constants.LEAVE_MAX_ADVANCE_DAYS
    leave_max_backdate_days: int = constants.LEAVE_MAX_BACKDATE_DAYS
    initialize_missing_leave_balance: bool = False

    tax_brackets: tuple[TaxBracket, ...] = build_tax_table(constants.TAX_BRACKETS)
    statutory_contributions: tuple[StatutoryContribution, ...] = build_contributions(
        constants.STATUTORY_CONTRIBUTIONS
    )


def _as_time(value, name: str) -> time:
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%H:%M").time()
    except ValueError as e:
        raise ConfigurationError(f"{name} must be HH:MM, got {value!r}") from e


def load_settings(module: ModuleType | str | None = None) -> EngineSettings:
    """Build ``EngineSettings`` from a settings module.

    ``module`` may be an imported module, a dotted path, or None to pick one
    from ``APP_ENV`` (after loading ``.env``).
    """
    if module is None:
        load_dotenv(override=False)
        module = get_settings_module()
    if isinstance(module, str):
        module = importlib.import_module(module)

    def opt(name: str, default):
        return getattr(module, name, default)

    start = _as_time(opt("STANDARD_START_TIME", constants.STANDARD_START_TIME), "STANDARD_START_TIME")
    end = _as_time(opt("STANDARD_END_TIME", constants.STANDARD_END_TIME), "STANDARD_END_TIME")
    if end <= start:
        raise ConfigurationError("STANDARD_END_TIME must be after STANDARD_START_TIME")

    grace = int(opt("LATE_GRACE_MINUTES", constants.LATE_GRACE_MINUTES))
    if grace < 0:
        raise ConfigurationError("LATE_GRACE_MINUTES cannot be negative")

    return EngineSettings(
        db_config=DBConfig.from_dict(getattr(module, "DB_CONFIG", {})),
        debug=bool(opt("DEBUG", False)),
        auto_init_db=bool(opt("AUTO_INIT_DB", False)),
        log_level=str(opt("LOG_LEVEL", "INFO")).upper(),
        log_json=bool(opt("LOG_JSON", False)),
        standard_start_time=start,
        standard_end_time=end,
        late_grace_minutes=grace,
        leave_max_advance_days=int(opt("LEAVE_MAX_ADVANCE_DAYS", constants.LEAVE_MAX_ADVANCE_DAYS)),
        leave_max_backdate_days=int(opt("LEAVE_MAX_BACKDATE_DAYS", constants.LEAVE_MAX_BACKDATE_DAYS)),
        initialize_missing_leave_balance=bool(opt("INITIALIZE_MISSING_LEAVE_BALANCE", False)),
        tax_brackets=build_tax_table(opt("TAX_BRACKETS", constants.TAX_BRACKETS)),
        statutory_contributions=build_contributions(
            opt("STATUTORY_CONTRIBUTIONS", constants.STATUTORY_CONTRIBUTIONS)
        ),
    )
