from __future__ import annotations

import logging

from dotenv import load_dotenv

from payroll_system.common.logging_config import configure_logging
from payroll_system.config import load_settings
from payroll_system.database.bootstrap import apply_schema, list_tables
from payroll_system.database.connection import DatabaseConnection

logger = logging.getLogger("payroll_system.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)

    conn = DatabaseConnection(settings.db_config)
    executed = apply_schema(conn)
    tables = list_tables(conn)
    cfg = settings.db_config
    logger.info(
        "Applied schema.sql (%s statements) -> %s@%s:%s/%s (tables=%s)",
        executed,
        cfg.user,
        cfg.host,
        cfg.port,
        cfg.database,
        len(tables),
    )


if __name__ == "__main__":
    main()
