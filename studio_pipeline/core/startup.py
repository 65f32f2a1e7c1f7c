"""Process bootstrap: logging, configuration and schema readiness checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from studio_pipeline.core.config import get_config
from studio_pipeline.core.logging_config import configure_logging
from studio_pipeline.database.db import get_active_database_url, get_engine, verify_database_connection

logger = logging.getLogger(__name__)

# Tables the quote/pipeline flow cannot run without.
REQUIRED_TABLES = frozenset({"tenants", "pipeline_stages", "promises", "quotes", "promise_status_history"})


@dataclass(frozen=True)
class StartupReport:
    database_ok: bool
    database_scheme: str
    missing_tables: list[str] = field(default_factory=list)

    @property
    def schema_ready(self) -> bool:
        return self.database_ok and not self.missing_tables


def _missing_tables() -> list[str]:
    try:
        present = set(inspect(get_engine()).get_table_names())
    except SQLAlchemyError:
        logger.exception("startup.schema.inspect_failed", extra={"event": "startup.schema.inspect_failed"})
        return sorted(REQUIRED_TABLES)
    return sorted(REQUIRED_TABLES - present)


def validate_startup_config() -> StartupReport:
    config = get_config()
    scheme = get_active_database_url().split("://", 1)[0]
    database_ok = verify_database_connection()

    if not database_ok:
        if config.DB_CONNECTIVITY_REQUIRED:
            raise RuntimeError("Database connectivity check failed.")
        logger.warning(
            "startup.database.unreachable",
            extra={"event": "startup.database.unreachable", "database_url_scheme": scheme},
        )
        return StartupReport(database_ok=False, database_scheme=scheme)

    if config.is_production and scheme == "sqlite":
        logger.warning("startup.production.sqlite_detected", extra={"event": "startup.production.sqlite_detected"})

    missing = _missing_tables()
    if missing:
        logger.warning(
            "startup.schema.missing_tables",
            extra={"event": "startup.schema.missing_tables", "tables": missing, "hint": "run studio-pipeline-init-db"},
        )

    report = StartupReport(database_ok=True, database_scheme=scheme, missing_tables=missing)
    logger.info(
        "startup.config.validated",
        extra={"event": "startup.config.validated", "env": config.ENV, "schema_ready": report.schema_ready},
    )
    return report


def bootstrap() -> StartupReport:
    configure_logging()
    return validate_startup_config()
