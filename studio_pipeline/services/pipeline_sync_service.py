"""Keeps a promise's persisted pipeline stage in step with its quotes.

The stage is recomputed from scratch on every call from the fresh, non-archived
quote set. Nothing is written when the resolved stage equals the current one,
so repeated calls without an intervening quote change write at most one
history entry. Concurrent syncs of the same promise are not serialized: each
re-derives independently and the last writer wins; history stays append-only.

Sync is fail-soft. Missing promises, unconfigured stages and read or write errors
are reported through ``SyncResult`` and logged; ``sync`` never raises, so a
failed sync cannot undo the quote change that triggered it.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio_pipeline.core.logging import LogContext, build_log_event
from studio_pipeline.database.db_handler import (
    fetch_active_stages,
    fetch_promise,
    fetch_quote_snapshots,
    fetch_stage,
)
from studio_pipeline.pipeline.stages import derive_target_stage, resolve_stage_slug
from studio_pipeline.services.base_service import BaseService
from studio_pipeline.services.status_history_service import StatusHistoryService

logger = logging.getLogger(__name__)

SYNC_REASON = "automatic sync from quote status"
SYNC_TRIGGER = "quote_status_sync"


class SyncOutcome(str, enum.Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


class SyncErrorCode(str, enum.Enum):
    PROMISE_NOT_FOUND = "promise_not_found"
    STAGE_NOT_CONFIGURED = "stage_not_configured"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass(frozen=True)
class SyncError:
    code: SyncErrorCode
    message: str


@dataclass(frozen=True)
class SyncResult:
    promise_id: int
    outcome: SyncOutcome
    target_slug: str | None = None
    resolved_slug: str | None = None
    fallback_applied: bool = False
    from_stage_id: int | None = None
    to_stage_id: int | None = None
    history_recorded: bool = False
    error: SyncError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return self.outcome is SyncOutcome.UPDATED


class PipelineSyncService(BaseService):
    """Derives, resolves and persists the pipeline stage of a promise."""

    def __init__(self, db: Session | None = None, history: StatusHistoryService | None = None) -> None:
        super().__init__(db)
        self.history = history or StatusHistoryService(db=self.db)

    def sync(self, promise_id: int, tenant_id: int, actor_id: int | None = None) -> SyncResult:
        context = LogContext(tenant_id=tenant_id, actor_id=actor_id, promise_id=promise_id)

        try:
            promise = fetch_promise(self.db, promise_id, tenant_id)
            if promise is None:
                logger.warning(
                    "pipeline_sync.promise_not_found",
                    extra=build_log_event("pipeline_sync.promise_not_found", context),
                )
                return SyncResult(
                    promise_id=promise_id,
                    outcome=SyncOutcome.SKIPPED,
                    error=SyncError(SyncErrorCode.PROMISE_NOT_FOUND, f"Promise not found: {promise_id}"),
                )

            snapshots = fetch_quote_snapshots(self.db, promise_id, tenant_id)
            stages = fetch_active_stages(self.db, tenant_id)
            target = derive_target_stage(snapshots)
            resolved_slug, fallback_applied = resolve_stage_slug(target, stages.keys())

            if resolved_slug is None:
                logger.warning(
                    "pipeline_sync.stage_not_configured",
                    extra=build_log_event(
                        "pipeline_sync.stage_not_configured",
                        context,
                        target_slug=target.value,
                        available_slugs=sorted(stages),
                    ),
                )
                return SyncResult(
                    promise_id=promise_id,
                    outcome=SyncOutcome.SKIPPED,
                    target_slug=target.value,
                    from_stage_id=promise.pipeline_stage_id,
                    error=SyncError(
                        SyncErrorCode.STAGE_NOT_CONFIGURED,
                        f"No active stage configured for '{target.value}'",
                    ),
                )

            to_stage = stages[resolved_slug]
            from_stage_id = promise.pipeline_stage_id
            if from_stage_id == to_stage.id:
                return SyncResult(
                    promise_id=promise_id,
                    outcome=SyncOutcome.UNCHANGED,
                    target_slug=target.value,
                    resolved_slug=resolved_slug,
                    fallback_applied=fallback_applied,
                    from_stage_id=from_stage_id,
                    to_stage_id=to_stage.id,
                )

            from_stage = fetch_stage(self.db, from_stage_id, tenant_id)
            promise.pipeline_stage_id = to_stage.id
            self.db.commit()
        except SQLAlchemyError as exc:
            self.rollback()
            logger.exception(
                "pipeline_sync.persistence_failed",
                extra=build_log_event("pipeline_sync.persistence_failed", context),
            )
            return SyncResult(
                promise_id=promise_id,
                outcome=SyncOutcome.FAILED,
                error=SyncError(SyncErrorCode.PERSISTENCE_FAILED, str(exc)),
            )
        except Exception as exc:
            self.rollback()
            logger.exception(
                "pipeline_sync.failed",
                extra=build_log_event("pipeline_sync.failed", context, error_type=type(exc).__name__),
            )
            return SyncResult(
                promise_id=promise_id,
                outcome=SyncOutcome.FAILED,
                error=SyncError(SyncErrorCode.PERSISTENCE_FAILED, str(exc)),
            )

        logger.info(
            "pipeline_sync.stage_updated",
            extra=build_log_event(
                "pipeline_sync.stage_updated",
                context,
                from_stage_id=from_stage_id,
                to_stage_id=to_stage.id,
                target_slug=target.value,
                resolved_slug=resolved_slug,
                fallback_applied=fallback_applied,
            ),
        )

        try:
            entry = self.history.record_stage_change(
                tenant_id=tenant_id,
                promise_id=promise_id,
                from_stage=from_stage,
                to_stage=to_stage,
                actor_id=actor_id,
                reason=SYNC_REASON,
                details={
                    "trigger": SYNC_TRIGGER,
                    "target_slug": target.value,
                    "resolved_slug": resolved_slug,
                    "fallback_applied": fallback_applied,
                    "quotes": [snapshot.as_dict() for snapshot in snapshots],
                },
            )
        except Exception:
            self.rollback()
            logger.exception(
                "pipeline_sync.history_failed",
                extra=build_log_event("pipeline_sync.history_failed", context, to_stage_id=to_stage.id),
            )
            entry = None

        return SyncResult(
            promise_id=promise_id,
            outcome=SyncOutcome.UPDATED,
            target_slug=target.value,
            resolved_slug=resolved_slug,
            fallback_applied=fallback_applied,
            from_stage_id=from_stage_id,
            to_stage_id=to_stage.id,
            history_recorded=entry is not None,
        )
