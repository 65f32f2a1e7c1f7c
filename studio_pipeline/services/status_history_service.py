"""Append-only audit trail of promise pipeline-stage changes."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select

from studio_pipeline.models import PipelineStage, PromiseStatusHistory
from studio_pipeline.services.base_service import BaseService

logger = logging.getLogger(__name__)


class StatusHistoryService(BaseService):
    """Writes history rows; writing is best-effort and never raises."""

    def record_stage_change(
        self,
        tenant_id: int,
        promise_id: int,
        from_stage: PipelineStage | None,
        to_stage: PipelineStage,
        actor_id: int | None = None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> PromiseStatusHistory | None:
        entry = PromiseStatusHistory(
            tenant_id=tenant_id,
            promise_id=promise_id,
            from_stage_id=from_stage.id if from_stage else None,
            from_stage_slug=from_stage.slug if from_stage else None,
            to_stage_id=to_stage.id,
            to_stage_slug=to_stage.slug,
            actor_id=actor_id,
            reason=reason,
            details=details,
        )
        self.db.add(entry)
        if not self.try_commit(
            "promise.status_history.write_failed",
            tenant_id=tenant_id,
            promise_id=promise_id,
            to_stage_slug=to_stage.slug,
        ):
            return None

        logger.info(
            "promise.status_history.recorded",
            extra={
                "event": "promise.status_history.recorded",
                "tenant_id": tenant_id,
                "promise_id": promise_id,
                "from_stage_slug": entry.from_stage_slug,
                "to_stage_slug": entry.to_stage_slug,
            },
        )
        return entry

    def list_for_promise(self, promise_id: int, tenant_id: int) -> list[PromiseStatusHistory]:
        stmt = (
            select(PromiseStatusHistory)
            .where(
                PromiseStatusHistory.promise_id == promise_id,
                PromiseStatusHistory.tenant_id == tenant_id,
            )
            .order_by(PromiseStatusHistory.created_at.desc(), PromiseStatusHistory.id.desc())
        )
        return list(self.db.scalars(stmt).all())
