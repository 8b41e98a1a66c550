import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "1")))

INITIALIZE_MISSING_LEAVE_BALANCE = bool(int(os.getenv("INITIALIZE_MISSING_LEAVE_BALANCE", "0")))

# Optional business overrides, e.g.
# STANDARD_START_TIME = os.getenv("STANDARD_START_TIME", "08:00")
# STANDARD_END_TIME = os.getenv("STANDARD_END_TIME", "17:00")
