"""Bring a database to the head schema and seed each tenant's pipeline stage catalog."""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig

from studio_pipeline.core.startup import bootstrap
import studio_pipeline.database.db as db_module
from studio_pipeline.models import Tenant
from studio_pipeline.services.stage_catalog_service import StageCatalogService

logger = logging.getLogger(__name__)
PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _alembic_config(database_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def seed_stage_catalogs() -> int:
    """Create the default stages for every active tenant missing them; returns stages created."""
    created = 0
    with StageCatalogService() as catalog:
        tenant_ids = [
            tenant.id for tenant in catalog.db.query(Tenant).filter(Tenant.is_active.is_(True), Tenant.deleted_at.is_(None))
        ]
        for tenant_id in tenant_ids:
            created += len(catalog.ensure_default_stages(tenant_id))
    return created


def init_db() -> None:
    bootstrap()
    active_url = db_module.get_active_database_url()
    command.upgrade(_alembic_config(active_url), "head")
    seeded = seed_stage_catalogs()
    logger.info(
        "database.initialized",
        extra={
            "event": "database.initialized",
            "database_scheme": active_url.split("://", 1)[0],
            "stages_seeded": seeded,
        },
    )


if __name__ == "__main__":
    init_db()
