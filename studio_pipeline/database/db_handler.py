"""Tenant-scoped read helpers shared by the pipeline services."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from studio_pipeline.models import PipelineStage, Promise, PromiseShortUrl, Quote, QuoteItem, Tenant
from studio_pipeline.pipeline.status import QuoteSnapshot


def fetch_tenant(session: Session, tenant_id: int) -> Tenant | None:
    tenant = session.get(Tenant, tenant_id)
    if tenant is None or tenant.is_deleted:
        return None
    return tenant


def fetch_promise(session: Session, promise_id: int, tenant_id: int) -> Promise | None:
    stmt = select(Promise).where(Promise.id == promise_id, *Promise.tenant_scope(tenant_id))
    return session.scalars(stmt).first()


def fetch_quote(session: Session, quote_id: int, tenant_id: int) -> Quote | None:
    stmt = select(Quote).where(Quote.id == quote_id, *Quote.tenant_scope(tenant_id))
    return session.scalars(stmt).first()


def fetch_live_quotes(session: Session, promise_id: int, tenant_id: int) -> list[Quote]:
    """Non-archived quotes of a promise, read fresh from the store."""
    stmt = (
        select(Quote)
        .where(Quote.promise_id == promise_id, Quote.archived.is_(False), *Quote.tenant_scope(tenant_id))
        .order_by(Quote.id)
    )
    return list(session.scalars(stmt).all())


def fetch_quote_snapshots(session: Session, promise_id: int, tenant_id: int) -> list[QuoteSnapshot]:
    return [QuoteSnapshot.from_row(quote) for quote in fetch_live_quotes(session, promise_id, tenant_id)]


def fetch_quote_items(session: Session, quote_id: int, tenant_id: int) -> list[QuoteItem]:
    stmt = (
        select(QuoteItem)
        .where(QuoteItem.quote_id == quote_id, *QuoteItem.tenant_scope(tenant_id))
        .order_by(QuoteItem.position, QuoteItem.id)
    )
    return list(session.scalars(stmt).all())


def fetch_active_stages(session: Session, tenant_id: int) -> dict[str, PipelineStage]:
    stmt = select(PipelineStage).where(PipelineStage.is_active.is_(True), *PipelineStage.tenant_scope(tenant_id))
    return {stage.slug: stage for stage in session.scalars(stmt).all()}


def fetch_stage(session: Session, stage_id: int | None, tenant_id: int) -> PipelineStage | None:
    # Inactive or soft-deleted stages are still valid "from" stages in history.
    if stage_id is None:
        return None
    stmt = select(PipelineStage).where(PipelineStage.id == stage_id, PipelineStage.tenant_id == tenant_id)
    return session.scalars(stmt).first()


def fetch_short_url(session: Session, promise_id: int, tenant_id: int) -> PromiseShortUrl | None:
    stmt = select(PromiseShortUrl).where(PromiseShortUrl.promise_id == promise_id, *PromiseShortUrl.tenant_scope(tenant_id))
    return session.scalars(stmt).first()
