"""Tenant model module."""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from studio_pipeline.models.base import AuditMixin, Base


class Tenant(Base, AuditMixin):
    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tenant_key: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # Pricing configuration consumed by the negotiation calculator.
    markup: Mapped[float | None] = mapped_column(Numeric(6, 4))
    sales_commission: Mapped[float | None] = mapped_column(Numeric(6, 4))
