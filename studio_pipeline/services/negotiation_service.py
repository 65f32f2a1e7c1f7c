"""Negotiation preview and persistence for a single quote."""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from studio_pipeline.core.config import get_config
from studio_pipeline.core.exceptions import NotFoundError, ValidationError
from studio_pipeline.core.logging import build_log_event
from studio_pipeline.database.db_handler import fetch_quote, fetch_quote_items, fetch_tenant
from studio_pipeline.models import Quote, QuoteItem, QuoteStatus
from studio_pipeline.models.base import utcnow
from studio_pipeline.orchestration.state_machine import quote_state_machine
from studio_pipeline.pipeline.negotiation import (
    ConditionTerms,
    CourtesyImpact,
    FinancialHealth,
    MarginValidation,
    NegotiationBreakdown,
    NegotiationItem,
    compute_breakdown,
    condition_terms,
    courtesy_impact,
    financial_health,
    validate_margin,
)
from studio_pipeline.pipeline.status import normalize_status
from studio_pipeline.services.base_service import BaseService
from studio_pipeline.services.pipeline_sync_service import SyncResult
from studio_pipeline.services.quote_service import QuoteService, quote_log_context
from studio_pipeline.utils.decimal_utils import to_decimal

logger = logging.getLogger(__name__)

NEGOTIABLE_STATUSES = frozenset({QuoteStatus.PENDING.value, QuoteStatus.NEGOTIATION.value})


@dataclass(frozen=True)
class NegotiationPreview:
    breakdown: NegotiationBreakdown
    margin: MarginValidation
    health: FinancialHealth
    courtesy: CourtesyImpact
    terms: ConditionTerms


@dataclass(frozen=True)
class NegotiationResult:
    quote: Quote
    preview: NegotiationPreview
    sync: SyncResult


class NegotiationService(BaseService):
    def __init__(self, db: Session | None = None, quotes: QuoteService | None = None) -> None:
        super().__init__(db)
        self.quotes = quotes or QuoteService(db=self.db)

    def _load(self, quote_id: int, tenant_id: int) -> tuple[Quote, list[QuoteItem]]:
        quote = fetch_quote(self.db, quote_id, tenant_id)
        if quote is None:
            raise NotFoundError(f"Quote not found: {quote_id}")
        if normalize_status(quote.status) not in NEGOTIABLE_STATUSES:
            raise ValidationError("Only pending or negotiation quotes can be negotiated.")
        return quote, fetch_quote_items(self.db, quote_id, tenant_id)

    def _pricing(self, tenant_id: int) -> tuple[Decimal, Decimal]:
        tenant = fetch_tenant(self.db, tenant_id)
        config = get_config()
        markup = tenant.markup if tenant is not None and tenant.markup is not None else config.DEFAULT_MARKUP
        commission = (
            tenant.sales_commission
            if tenant is not None and tenant.sales_commission is not None
            else config.DEFAULT_SALES_COMMISSION
        )
        return to_decimal(markup), to_decimal(commission)

    def _preview(
        self,
        quote: Quote,
        items: list[QuoteItem],
        tenant_id: int,
        manual_price: Any,
        courtesy_item_ids: Collection[int] | None,
    ) -> NegotiationPreview:
        if manual_price is not None and to_decimal(manual_price) < 0:
            raise ValidationError("Manual price cannot be negative.")

        item_ids = {item.id for item in items}
        if courtesy_item_ids is None:
            courtesy = {item.id for item in items if item.is_courtesy}
        else:
            courtesy = set(courtesy_item_ids)
            unknown = courtesy - item_ids
            if unknown:
                raise ValidationError(f"Courtesy items do not belong to quote {quote.id}: {sorted(unknown)}")

        markup, commission = self._pricing(tenant_id)
        negotiation_items = [NegotiationItem.from_row(item) for item in items]
        original = quote.negotiation_original_price or quote.price
        breakdown = compute_breakdown(
            negotiation_items,
            courtesy,
            manual_price=manual_price,
            markup=markup,
            original_price=original if to_decimal(original) > 0 else None,
            commission_rate=commission,
            event_duration_hours=quote.event_duration_hours,
        )
        return NegotiationPreview(
            breakdown=breakdown,
            margin=validate_margin(
                breakdown.margin_percent, breakdown.final_price, breakdown.cost_total, breakdown.expense_total
            ),
            health=financial_health(breakdown.cost_total, breakdown.expense_total, breakdown.final_price, commission),
            courtesy=courtesy_impact(negotiation_items, courtesy),
            terms=condition_terms(breakdown.final_price, quote.commercial_condition),
        )

    def preview(
        self,
        quote_id: int,
        tenant_id: int,
        manual_price: Any = None,
        courtesy_item_ids: Collection[int] | None = None,
    ) -> NegotiationPreview:
        quote, items = self._load(quote_id, tenant_id)
        return self._preview(quote, items, tenant_id, manual_price, courtesy_item_ids)

    def apply(
        self,
        quote_id: int,
        tenant_id: int,
        manual_price: Any = None,
        courtesy_item_ids: Collection[int] | None = None,
        notes: str | None = None,
        actor_id: int | None = None,
    ) -> NegotiationResult:
        """Persist a negotiation and move the quote into the negotiation status."""
        quote, items = self._load(quote_id, tenant_id)
        preview = self._preview(quote, items, tenant_id, manual_price, courtesy_item_ids)
        breakdown = preview.breakdown
        if breakdown.below_cost_floor:
            raise ValidationError(preview.margin.message)

        courtesy = {line.item_id for line in breakdown.lines if line.is_courtesy}
        for item in items:
            item.is_courtesy = item.id in courtesy

        previous = normalize_status(quote.status)
        quote_state_machine.assert_transition(previous, QuoteStatus.NEGOTIATION.value)
        if quote.negotiation_original_price is None:
            quote.negotiation_original_price = quote.price
        if quote.negotiated_at is None:
            quote.negotiated_at = utcnow()
        manual = to_decimal(manual_price)
        quote.negotiation_custom_price = manual if manual > 0 else None
        quote.negotiation_notes = notes
        quote.price = breakdown.final_price
        quote.status = QuoteStatus.NEGOTIATION.value
        self.commit()

        logger.info(
            "quote.negotiation.applied",
            extra=build_log_event(
                "quote.negotiation.applied",
                quote_log_context(quote, actor_id),
                final_price=str(breakdown.final_price),
                courtesy_items=len(courtesy),
                margin_warning=breakdown.margin_warning,
            ),
        )
        return NegotiationResult(quote=quote, preview=preview, sync=self.quotes.after_quote_change(quote, actor_id))
