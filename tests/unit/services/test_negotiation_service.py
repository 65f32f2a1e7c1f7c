from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from studio_pipeline.core.exceptions import NotFoundError, ValidationError
from studio_pipeline.models import CommercialCondition
from studio_pipeline.services.negotiation_service import NegotiationService

ITEMS = (
    {"name": "Photography", "quantity": 2, "unit_price": "500", "cost": "100", "expense": "20"},
    {"name": "Album", "quantity": 1, "unit_price": "300", "cost": "50", "expense": "10"},
)


def _quote(make_promise, make_quote, status="pending"):
    return make_quote(make_promise(), status=status, price="1300", items=ITEMS)


def test_preview_uses_tenant_pricing(session, tenant, stages, make_promise, make_quote):
    quote = _quote(make_promise, make_quote)

    preview = NegotiationService(db=session).preview(quote.id, tenant.id, manual_price=Decimal("900"))

    assert preview.breakdown.final_price == Decimal("900.00")
    assert preview.breakdown.discount_ratio == Decimal("0.3077")
    assert preview.breakdown.margin_warning is True
    assert preview.breakdown.commission_amount == Decimal("45.00")
    assert preview.margin.level == "acceptable"
    assert preview.terms.total_due == Decimal("900.00")


def test_preview_defaults_courtesy_to_stored_flags(session, tenant, stages, make_promise, make_quote):
    items = (ITEMS[0], {**ITEMS[1], "is_courtesy": True})
    quote = make_quote(make_promise(), price="1300", items=items)

    preview = NegotiationService(db=session).preview(quote.id, tenant.id)

    assert preview.breakdown.reference_price == Decimal("1000.00")
    assert preview.courtesy.courtesy_total == Decimal("300.00")


def test_preview_rejects_foreign_courtesy_items(session, tenant, stages, make_promise, make_quote):
    quote = _quote(make_promise, make_quote)

    with pytest.raises(ValidationError):
        NegotiationService(db=session).preview(quote.id, tenant.id, courtesy_item_ids=[9999])


def test_preview_rejects_negative_manual_price(session, tenant, stages, make_promise, make_quote):
    quote = _quote(make_promise, make_quote)

    with pytest.raises(ValidationError):
        NegotiationService(db=session).preview(quote.id, tenant.id, manual_price=Decimal("-1"))


def test_preview_rejects_non_negotiable_status(session, tenant, stages, make_promise, make_quote):
    quote = _quote(make_promise, make_quote, status="approved")

    with pytest.raises(ValidationError):
        NegotiationService(db=session).preview(quote.id, tenant.id)


def test_preview_missing_quote(session, tenant, stages):
    with pytest.raises(NotFoundError):
        NegotiationService(db=session).preview(123, tenant.id)


def test_preview_applies_commercial_condition(session, tenant, stages, make_promise, make_quote):
    condition = CommercialCondition(
        tenant_id=tenant.id,
        name="Half up front",
        discount_percentage=Decimal("10"),
        advance_type="percentage",
        advance_percentage=Decimal("50"),
    )
    session.add(condition)
    session.commit()
    quote = _quote(make_promise, make_quote)
    quote.commercial_condition_id = condition.id
    session.commit()

    terms = NegotiationService(db=session).preview(quote.id, tenant.id).terms

    assert terms.total_due == Decimal("1170.00")
    assert terms.advance_amount == Decimal("585.00")


def test_apply_persists_negotiation_and_syncs(session, tenant, stages, make_promise, make_quote):
    quote = _quote(make_promise, make_quote)
    album_id = quote.items[1].id

    result = NegotiationService(db=session).apply(
        quote.id, tenant.id, manual_price=Decimal("950"), courtesy_item_ids=[album_id], notes="Album on the house"
    )

    session.refresh(quote)
    assert quote.status == "negotiation"
    assert quote.price == Decimal("950.00")
    assert quote.negotiation_original_price == Decimal("1300.00")
    assert quote.negotiation_custom_price == Decimal("950.00")
    assert quote.negotiation_notes == "Album on the house"
    assert quote.negotiated_at is not None
    assert [item.is_courtesy for item in quote.items] == [False, True]
    assert result.sync.resolved_slug == "negotiation"


def test_apply_keeps_first_original_price(session, tenant, stages, make_promise, make_quote):
    quote = _quote(make_promise, make_quote)
    service = NegotiationService(db=session)

    service.apply(quote.id, tenant.id, manual_price=Decimal("1100"))
    service.apply(quote.id, tenant.id, manual_price=Decimal("1000"))

    session.refresh(quote)
    assert quote.negotiation_original_price == Decimal("1300.00")
    assert quote.price == Decimal("1000.00")


def test_apply_rejects_price_below_cost(session, tenant, stages, make_promise, make_quote):
    quote = _quote(make_promise, make_quote)

    with pytest.raises(ValidationError):
        NegotiationService(db=session).apply(quote.id, tenant.id, manual_price=Decimal("200"))

    session.refresh(quote)
    assert quote.status == "pending"


def test_apply_logs_under_quote_context(session, tenant, stages, make_promise, make_quote, caplog):
    quote = _quote(make_promise, make_quote)
    caplog.set_level(logging.INFO, logger="studio_pipeline.services.negotiation_service")

    NegotiationService(db=session).apply(quote.id, tenant.id, manual_price=Decimal("1200"), actor_id=4)

    record = next(r for r in caplog.records if r.getMessage() == "quote.negotiation.applied")
    assert record.quote_id == quote.id
    assert record.promise_id == quote.promise_id
    assert record.actor_id == 4
    assert record.final_price == "1200.00"
