"""Commercial condition model module."""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studio_pipeline.models.base import AuditMixin, Base, TenantScopedMixin
from studio_pipeline.models.enums import AdvanceType


class CommercialCondition(Base, AuditMixin, TenantScopedMixin):
    __tablename__ = "commercial_conditions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    discount_percentage: Mapped[float | None] = mapped_column(Numeric(5, 2))
    advance_type: Mapped[str] = mapped_column(String(20), default=AdvanceType.PERCENTAGE.value, nullable=False)
    advance_percentage: Mapped[float | None] = mapped_column(Numeric(5, 2))
    advance_amount: Mapped[float | None] = mapped_column(Numeric(12, 2))
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
