"""Quote status and negotiation schemas for API contracts."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from studio_pipeline.schemas.promises import SyncResponse


class QuoteStatusUpdateRequest(BaseModel):
    status: str = Field(min_length=2, max_length=40)


class QuoteSelectionUpdateRequest(BaseModel):
    selected_by_prospect: bool | None = None


class QuoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    promise_id: int
    name: str
    status: str
    selected_by_prospect: bool | None = None
    price: Decimal


class QuoteChangeResponse(BaseModel):
    quote: QuoteResponse
    previous_status: str
    sync: SyncResponse


class NegotiationRequest(BaseModel):
    manual_price: Decimal | None = Field(default=None, ge=0)
    courtesy_item_ids: list[int] | None = None
    notes: str | None = Field(default=None, max_length=10000)


class NegotiatedLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: Any
    original_price: Decimal
    negotiated_price: Decimal
    is_courtesy: bool


class BreakdownResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cost_total: Decimal
    expense_total: Decimal
    reference_price: Decimal
    final_price: Decimal
    net_profit: Decimal
    margin_percent: Decimal
    markup_adjusted_profit: Decimal
    discount_ratio: Decimal
    margin_warning: bool
    original_price: Decimal
    commission_rate: Decimal
    commission_amount: Decimal
    net_profit_after_commission: Decimal
    below_cost_floor: bool
    lines: list[NegotiatedLineResponse]


class MarginValidationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    level: str
    message: str


class FinancialHealthResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    state: str
    margin_percent: Decimal
    rescue_price: Decimal
    shortfall: Decimal
    message: str


class CourtesyImpactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    courtesy_total: Decimal
    profit_impact: Decimal


class ConditionTermsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    discount_amount: Decimal
    total_due: Decimal
    advance_amount: Decimal
    balance_due: Decimal


class NegotiationPreviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    breakdown: BreakdownResponse
    margin: MarginValidationResponse
    health: FinancialHealthResponse
    courtesy: CourtesyImpactResponse
    terms: ConditionTermsResponse


class NegotiationApplyResponse(BaseModel):
    quote: QuoteResponse
    preview: NegotiationPreviewResponse
    sync: SyncResponse
