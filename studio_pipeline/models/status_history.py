"""Promise pipeline-stage audit history model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studio_pipeline.models.base import Base, TenantScopedMixin, utcnow


class PromiseStatusHistory(Base, TenantScopedMixin):
    """Append-only record of a promise moving between pipeline stages."""

    __tablename__ = "promise_status_history"
    __table_args__ = (Index("idx_promise_status_history_tenant_promise", "tenant_id", "promise_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    promise_id: Mapped[int] = mapped_column(ForeignKey("promises.id", ondelete="CASCADE"), nullable=False)
    from_stage_id: Mapped[int | None] = mapped_column(Integer)
    from_stage_slug: Mapped[str | None] = mapped_column(String(60))
    to_stage_id: Mapped[int] = mapped_column(Integer, nullable=False)
    to_stage_slug: Mapped[str] = mapped_column(String(60), nullable=False)
    actor_id: Mapped[int | None] = mapped_column(Integer)
    reason: Mapped[str | None] = mapped_column(Text)
    details: Mapped[dict | None] = mapped_column("metadata", JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
