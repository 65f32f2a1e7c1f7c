"""Per-tenant pipeline stage catalog."""

from __future__ import annotations

import logging

from studio_pipeline.database.db_handler import fetch_active_stages
from studio_pipeline.models import PipelineStage, StageSlug
from studio_pipeline.services.base_service import BaseService

logger = logging.getLogger(__name__)

DEFAULT_STAGES: tuple[tuple[str, str], ...] = (
    (StageSlug.PENDING.value, "Pending"),
    (StageSlug.NEGOTIATION.value, "Negotiation"),
    (StageSlug.CLOSING.value, "Closing"),
    (StageSlug.APPROVED.value, "Approved"),
    (StageSlug.CANCELED.value, "Canceled"),
)


class StageCatalogService(BaseService):
    def active_stages(self, tenant_id: int) -> dict[str, PipelineStage]:
        """Active stages of a tenant keyed by slug."""
        return fetch_active_stages(self.db, tenant_id)

    def ensure_default_stages(self, tenant_id: int, slugs: tuple[str, ...] | None = None) -> list[PipelineStage]:
        """Create any missing default stages (optionally only ``slugs``) for a tenant."""
        existing = {
            stage.slug
            for stage in self.db.query(PipelineStage).filter(PipelineStage.tenant_id == tenant_id).all()
        }
        created: list[PipelineStage] = []
        for position, (slug, name) in enumerate(DEFAULT_STAGES):
            if slug in existing or (slugs is not None and slug not in slugs):
                continue
            stage = PipelineStage(tenant_id=tenant_id, slug=slug, name=name, position=position, is_active=True)
            self.db.add(stage)
            created.append(stage)

        if created:
            self.commit()
            logger.info(
                "pipeline_stages.defaults_created",
                extra={
                    "event": "pipeline_stages.defaults_created",
                    "tenant_id": tenant_id,
                    "slugs": [stage.slug for stage in created],
                },
            )
        return created
