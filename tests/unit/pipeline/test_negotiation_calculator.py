from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

from studio_pipeline.models.enums import BillingType
from studio_pipeline.pipeline.negotiation import (
    NegotiationItem,
    commission_ratio,
    compute_breakdown,
    condition_terms,
    courtesy_impact,
    financial_health,
    validate_margin,
)

ITEMS = [
    NegotiationItem(item_id="a", quantity=2, unit_price=Decimal("500"), cost=Decimal("100"), expense=Decimal("20")),
    NegotiationItem(item_id="b", quantity=1, unit_price=Decimal("300"), cost=Decimal("50"), expense=Decimal("10")),
]


def test_without_courtesy_or_manual_price_final_equals_list_total():
    breakdown = compute_breakdown(ITEMS)

    assert breakdown.reference_price == Decimal("1300.00")
    assert breakdown.final_price == breakdown.reference_price
    assert breakdown.cost_total == Decimal("250.00")
    assert breakdown.expense_total == Decimal("50.00")
    assert breakdown.net_profit == breakdown.final_price - breakdown.cost_total - breakdown.expense_total
    assert breakdown.margin_percent == Decimal("76.92")
    assert breakdown.discount_ratio == Decimal("0")
    assert breakdown.margin_warning is False


def test_courtesy_item_reduces_reference_price_only():
    base = compute_breakdown(ITEMS)
    courtesy = compute_breakdown(ITEMS, courtesy_item_ids={"b"})

    assert base.reference_price - courtesy.reference_price == Decimal("300.00")
    assert courtesy.cost_total == base.cost_total
    assert courtesy.expense_total == base.expense_total
    line = next(line for line in courtesy.lines if line.item_id == "b")
    assert line.is_courtesy is True
    assert line.negotiated_price == Decimal("0.00")
    assert line.original_price == Decimal("300.00")


def test_manual_price_overrides_reference_and_flags_discount_over_markup():
    breakdown = compute_breakdown(ITEMS, manual_price=Decimal("900"), markup=Decimal("0.30"))

    assert breakdown.final_price == Decimal("900.00")
    assert breakdown.net_profit == Decimal("600.00")
    assert breakdown.discount_ratio == Decimal("0.3077")
    assert breakdown.margin_warning is True


def test_discount_within_markup_does_not_warn():
    breakdown = compute_breakdown(ITEMS, manual_price=Decimal("1000"), markup=Decimal("0.30"))
    assert breakdown.discount_ratio == Decimal("0.2308")
    assert breakdown.margin_warning is False


def test_zero_manual_price_means_no_override():
    assert compute_breakdown(ITEMS, manual_price=0).final_price == Decimal("1300.00")


def test_markup_adjusted_profit():
    breakdown = compute_breakdown(ITEMS, markup=Decimal("0.30"))
    assert breakdown.markup_adjusted_profit == Decimal("700.00")


def test_commission_reported_separately_from_net_profit():
    breakdown = compute_breakdown(ITEMS, commission_rate=5)

    assert breakdown.commission_rate == Decimal("0.05")
    assert breakdown.commission_amount == Decimal("65.00")
    assert breakdown.net_profit == Decimal("1000.00")
    assert breakdown.net_profit_after_commission == Decimal("935.00")


def test_empty_items_yield_zero_margin():
    breakdown = compute_breakdown([])
    assert breakdown.final_price == Decimal("0.00")
    assert breakdown.margin_percent == Decimal("0.00")
    assert breakdown.discount_ratio == Decimal("0")


def test_hourly_items_multiply_cost_by_event_duration():
    item = NegotiationItem(
        item_id=1, quantity=2, unit_price=Decimal("100"), cost=Decimal("10"), billing_type="HOUR"
    )
    breakdown = compute_breakdown([item], event_duration_hours=Decimal("4"))

    assert breakdown.cost_total == Decimal("80.00")
    assert breakdown.reference_price == Decimal("200.00")

    enum_item = NegotiationItem(
        item_id=2, quantity=2, unit_price=Decimal("100"), cost=Decimal("10"), billing_type=BillingType.HOUR
    )
    assert compute_breakdown([enum_item], event_duration_hours=4).cost_total == Decimal("80.00")
    assert NegotiationItem(item_id=3, quantity=2, unit_price=Decimal("1"), billing_type="hour").effective_quantity(3) == Decimal("6")


def test_below_cost_floor_detection():
    assert compute_breakdown(ITEMS, manual_price=Decimal("200")).below_cost_floor is True
    assert compute_breakdown(ITEMS).below_cost_floor is False


def test_commission_ratio_accepts_percent_or_fraction():
    assert commission_ratio("5") == Decimal("0.05")
    assert commission_ratio(Decimal("0.05")) == Decimal("0.05")
    assert commission_ratio(None) == Decimal("0")


def test_validate_margin_levels():
    assert validate_margin(Decimal("76.92"), 1300, 250, 50).level == "acceptable"
    assert validate_margin(Decimal("15"), 100, 50, 35).level == "low"

    critical = validate_margin(Decimal("5"), 100, 60, 35)
    assert critical.level == "critical"
    assert critical.is_valid is True

    below_floor = validate_margin(Decimal("-50"), 200, 250, 50)
    assert below_floor.is_valid is False
    assert "300.00" in below_floor.message


def test_financial_health_states_and_rescue_price():
    healthy = financial_health(250, 50, 1300, Decimal("0.05"))
    assert healthy.state == "healthy"
    assert healthy.rescue_price == Decimal("400.00")

    assert financial_health(250, 50, 390, Decimal("0.05")).state == "warning"

    critical = financial_health(250, 50, 360, Decimal("0.05"))
    assert critical.state == "critical"
    assert critical.shortfall == Decimal("40.00")

    assert financial_health(250, 50, 320, Decimal("0.05")).state == "danger"


def test_courtesy_impact_counts_given_away_revenue():
    impact = courtesy_impact(ITEMS, {"b"})
    assert impact.courtesy_total == Decimal("300.00")
    assert impact.profit_impact == Decimal("-240.00")


def test_condition_terms_percentage_advance():
    condition = SimpleNamespace(
        discount_percentage=Decimal("10"), advance_type="percentage", advance_percentage=Decimal("50"), advance_amount=None
    )
    terms = condition_terms(Decimal("1000"), condition)
    assert terms.discount_amount == Decimal("100.00")
    assert terms.total_due == Decimal("900.00")
    assert terms.advance_amount == Decimal("450.00")
    assert terms.balance_due == Decimal("450.00")


def test_condition_terms_fixed_advance_is_capped_at_total():
    condition = SimpleNamespace(
        discount_percentage=Decimal("10"), advance_type="fixed_amount", advance_percentage=None, advance_amount=Decimal("2000")
    )
    terms = condition_terms(Decimal("1000"), condition)
    assert terms.advance_amount == Decimal("900.00")
    assert terms.balance_due == Decimal("0.00")


def test_condition_terms_without_condition():
    terms = condition_terms(Decimal("1000"), None)
    assert terms.total_due == Decimal("1000.00")
    assert terms.advance_amount == Decimal("0.00")
