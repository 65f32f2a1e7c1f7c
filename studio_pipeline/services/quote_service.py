"""Quote status and prospect-selection mutations, with their pipeline follow-ups."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studio_pipeline.core.exceptions import NotFoundError, ValidationError
from studio_pipeline.core.logging import LogContext, build_log_event
from studio_pipeline.database.db_handler import fetch_live_quotes, fetch_quote, fetch_quote_snapshots
from studio_pipeline.models import Quote, QuoteStatus
from studio_pipeline.orchestration.state_machine import quote_state_machine
from studio_pipeline.pipeline.status import QuoteSnapshot, normalize_status
from studio_pipeline.services.base_service import BaseService
from studio_pipeline.services.pipeline_sync_service import PipelineSyncService, SyncResult
from studio_pipeline.services.short_url_service import ShortUrlService

logger = logging.getLogger(__name__)

KNOWN_STATUSES = frozenset(status.value for status in QuoteStatus)


def quote_log_context(quote: Quote, actor_id: int | None = None) -> LogContext:
    return LogContext(tenant_id=quote.tenant_id, actor_id=actor_id, promise_id=quote.promise_id).for_quote(quote.id)


@dataclass(frozen=True)
class QuoteChangeResult:
    quote: Quote
    previous_status: str
    sync: SyncResult


class QuoteService(BaseService):
    """Service for quote status transitions.

    Every committed mutation is followed by a pipeline-stage sync and a
    short-link route sync for the owning promise. Those follow-ups are
    fail-soft: the quote change is already committed when they run.
    """

    def __init__(
        self,
        db: Session | None = None,
        sync_service: PipelineSyncService | None = None,
        short_urls: ShortUrlService | None = None,
    ) -> None:
        super().__init__(db)
        self.sync_service = sync_service or PipelineSyncService(db=self.db)
        self.short_urls = short_urls or ShortUrlService(db=self.db)

    def get_quote(self, quote_id: int, tenant_id: int) -> Quote:
        quote = fetch_quote(self.db, quote_id, tenant_id)
        if quote is None:
            raise NotFoundError(f"Quote not found: {quote_id}")
        return quote

    def list_snapshots(self, promise_id: int, tenant_id: int) -> list[QuoteSnapshot]:
        return fetch_quote_snapshots(self.db, promise_id, tenant_id)

    def change_status(
        self,
        quote_id: int,
        tenant_id: int,
        new_status: str,
        actor_id: int | None = None,
    ) -> QuoteChangeResult:
        target = normalize_status(new_status)
        if target not in KNOWN_STATUSES:
            raise ValidationError(f"Unknown quote status: {new_status}")

        quote = self.get_quote(quote_id, tenant_id)
        previous = normalize_status(quote.status)
        quote_state_machine.assert_transition(previous, target)

        quote.status = target
        self.commit()
        logger.info(
            "quote.status.updated",
            extra=build_log_event(
                "quote.status.updated",
                quote_log_context(quote, actor_id),
                from_status=previous,
                to_status=target,
            ),
        )
        return QuoteChangeResult(quote=quote, previous_status=previous, sync=self.after_quote_change(quote, actor_id))

    def set_prospect_selection(
        self,
        quote_id: int,
        tenant_id: int,
        selected: bool | None,
        actor_id: int | None = None,
    ) -> QuoteChangeResult:
        """Set the tri-state selection flag; selecting one quote deselects its siblings."""
        quote = self.get_quote(quote_id, tenant_id)
        previous = normalize_status(quote.status)

        if selected is True:
            for sibling in fetch_live_quotes(self.db, quote.promise_id, tenant_id):
                if sibling.id != quote.id and sibling.selected_by_prospect:
                    sibling.selected_by_prospect = False
        quote.selected_by_prospect = selected
        self.commit()
        logger.info(
            "quote.selection.updated",
            extra=build_log_event(
                "quote.selection.updated",
                quote_log_context(quote, actor_id),
                selected_by_prospect=selected,
            ),
        )
        return QuoteChangeResult(quote=quote, previous_status=previous, sync=self.after_quote_change(quote, actor_id))

    def after_quote_change(self, quote: Quote, actor_id: int | None = None) -> SyncResult:
        """Re-derive everything that depends on the promise's quote set."""
        promise_id = quote.promise_id
        tenant_id = quote.tenant_id
        context = quote_log_context(quote, actor_id)
        result = self.sync_service.sync(promise_id, tenant_id, actor_id=actor_id)
        try:
            self.short_urls.sync_route(promise_id, tenant_id)
        except (NotFoundError, SQLAlchemyError):
            self.rollback()
            logger.exception(
                "short_url.route_sync_failed",
                extra=build_log_event("short_url.route_sync_failed", context),
            )
        return result
