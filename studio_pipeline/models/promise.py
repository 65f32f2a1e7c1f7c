"""Promise (sales opportunity) model module."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studio_pipeline.models.base import AuditMixin, Base, TenantScopedMixin


class Promise(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "promises"
    __table_args__ = (Index("idx_promises_tenant_stage", "tenant_id", "pipeline_stage_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    pipeline_stage_id: Mapped[int | None] = mapped_column(
        ForeignKey("pipeline_stages.id", ondelete="SET NULL"), nullable=True
    )

    pipeline_stage = relationship("PipelineStage")
    quotes = relationship("Quote", back_populates="promise", order_by="Quote.id")
