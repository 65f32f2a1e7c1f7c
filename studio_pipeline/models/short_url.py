"""Public short link model module."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from studio_pipeline.models.base import AuditMixin, Base, TenantScopedMixin


class PromiseShortUrl(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "promise_short_urls"
    __table_args__ = (Index("idx_promise_short_urls_tenant_promise", "tenant_id", "promise_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    promise_id: Mapped[int] = mapped_column(ForeignKey("promises.id", ondelete="CASCADE"), nullable=False)
    short_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    original_url: Mapped[str] = mapped_column(String(512), nullable=False)
