"""Quote and quote line item model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studio_pipeline.models.base import AuditMixin, Base, TenantScopedMixin
from studio_pipeline.models.enums import BillingType, QuoteStatus


class Quote(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "quotes"
    __table_args__ = (
        Index("idx_quotes_tenant_promise", "tenant_id", "promise_id"),
        Index("idx_quotes_tenant_status", "tenant_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    promise_id: Mapped[int] = mapped_column(ForeignKey("promises.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Stored as text: legacy rows may still carry aliases that the normalizer collapses.
    status: Mapped[str] = mapped_column(String(40), default=QuoteStatus.PENDING.value, nullable=False)
    selected_by_prospect: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    price: Mapped[float] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    event_duration_hours: Mapped[float | None] = mapped_column(Numeric(6, 2))
    commercial_condition_id: Mapped[int | None] = mapped_column(
        ForeignKey("commercial_conditions.id", ondelete="SET NULL"), nullable=True
    )
    negotiation_original_price: Mapped[float | None] = mapped_column(Numeric(12, 2))
    negotiation_custom_price: Mapped[float | None] = mapped_column(Numeric(12, 2))
    negotiation_notes: Mapped[str | None] = mapped_column(Text)
    negotiated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    promise = relationship("Promise", back_populates="quotes")
    commercial_condition = relationship("CommercialCondition")
    items = relationship("QuoteItem", back_populates="quote", order_by="QuoteItem.position")


class QuoteItem(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "quote_items"
    __table_args__ = (Index("idx_quote_items_tenant_quote", "tenant_id", "quote_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quote_id: Mapped[int] = mapped_column(ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    unit_price: Mapped[float] = mapped_column(Numeric(12, 2), default=0, nullable=False)
    cost: Mapped[float | None] = mapped_column(Numeric(12, 2))
    expense: Mapped[float | None] = mapped_column(Numeric(12, 2))
    billing_type: Mapped[str] = mapped_column(String(20), default=BillingType.SERVICE.value, nullable=False)
    is_courtesy: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    quote = relationship("Quote", back_populates="items")
