"""Negotiation financial engine.

Recomputes price, cost, margin and commission for a quote while it is being
negotiated: line items can be marked as courtesy (charged at zero while their
cost and expense still accrue) and the total can be overridden with a manual
price. Everything here is pure arithmetic over the arguments; callers validate
that prices and rates are non-negative before calling.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from studio_pipeline.models.enums import AdvanceType, BillingType
from studio_pipeline.utils.decimal_utils import ZERO, money, ratio, to_decimal

HUNDRED = Decimal("100")
TARGET_MARGIN = Decimal("20")
LOW_MARGIN = Decimal("15")
CRITICAL_MARGIN = Decimal("10")


@dataclass(frozen=True)
class NegotiationItem:
    item_id: Any
    quantity: int
    unit_price: Decimal
    cost: Decimal = ZERO
    expense: Decimal = ZERO
    billing_type: str = BillingType.SERVICE.value

    @classmethod
    def from_row(cls, row: Any) -> "NegotiationItem":
        return cls(
            item_id=row.id,
            quantity=int(row.quantity or 0),
            unit_price=to_decimal(row.unit_price),
            cost=to_decimal(row.cost),
            expense=to_decimal(row.expense),
            billing_type=(row.billing_type or BillingType.SERVICE.value),
        )

    @property
    def list_price(self) -> Decimal:
        return to_decimal(self.unit_price) * self.quantity

    def effective_quantity(self, event_duration_hours: Any = None) -> Decimal:
        """Hourly items bill quantity x event duration for cost and expense."""
        duration = to_decimal(event_duration_hours)
        billing = getattr(self.billing_type, "value", self.billing_type)
        if str(billing).upper() == BillingType.HOUR.value and duration > 0:
            return Decimal(self.quantity) * duration
        return Decimal(self.quantity)


@dataclass(frozen=True)
class NegotiatedLine:
    item_id: Any
    original_price: Decimal
    negotiated_price: Decimal
    is_courtesy: bool


@dataclass(frozen=True)
class NegotiationBreakdown:
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
    lines: list[NegotiatedLine] = field(default_factory=list)


@dataclass(frozen=True)
class MarginValidation:
    is_valid: bool
    level: str
    message: str


@dataclass(frozen=True)
class FinancialHealth:
    state: str
    margin_percent: Decimal
    rescue_price: Decimal
    shortfall: Decimal
    message: str


@dataclass(frozen=True)
class CourtesyImpact:
    courtesy_total: Decimal
    profit_impact: Decimal


@dataclass(frozen=True)
class ConditionTerms:
    discount_amount: Decimal
    total_due: Decimal
    advance_amount: Decimal
    balance_due: Decimal


def commission_ratio(rate: Any) -> Decimal:
    """Commission may be configured as a fraction (0.05) or a whole percent (5)."""
    value = to_decimal(rate)
    return value / HUNDRED if value > 1 else value


def _as_items(items: Iterable[Any]) -> list[NegotiationItem]:
    return [item if isinstance(item, NegotiationItem) else NegotiationItem.from_row(item) for item in items]


def compute_breakdown(
    items: Iterable[Any],
    courtesy_item_ids: Collection[Any] = (),
    manual_price: Any = None,
    markup: Any = 0,
    original_price: Any = None,
    commission_rate: Any = 0,
    event_duration_hours: Any = None,
) -> NegotiationBreakdown:
    negotiation_items = _as_items(items)
    courtesy = set(courtesy_item_ids)
    markup_value = to_decimal(markup)

    cost_total = ZERO
    expense_total = ZERO
    reference_price = ZERO
    list_total = ZERO
    lines: list[NegotiatedLine] = []

    for item in negotiation_items:
        qty = item.effective_quantity(event_duration_hours)
        cost_total += to_decimal(item.cost) * qty
        expense_total += to_decimal(item.expense) * qty

        is_courtesy = item.item_id in courtesy
        item_price = item.list_price
        negotiated = ZERO if is_courtesy else item_price
        reference_price += negotiated
        list_total += item_price
        lines.append(
            NegotiatedLine(
                item_id=item.item_id,
                original_price=money(item_price),
                negotiated_price=money(negotiated),
                is_courtesy=is_courtesy,
            )
        )

    manual = to_decimal(manual_price)
    final_price = manual if manual > 0 else reference_price
    total_spend = cost_total + expense_total

    net_profit = final_price - total_spend
    margin_percent = net_profit / final_price * HUNDRED if final_price > 0 else ZERO
    markup_adjusted_profit = final_price / (1 + markup_value) - total_spend

    original = to_decimal(original_price) if original_price is not None else list_total
    discount_ratio = (reference_price - final_price) / original if original > 0 else ZERO

    commission = commission_ratio(commission_rate)
    commission_amount = final_price * commission

    return NegotiationBreakdown(
        cost_total=money(cost_total),
        expense_total=money(expense_total),
        reference_price=money(reference_price),
        final_price=money(final_price),
        net_profit=money(net_profit),
        margin_percent=money(margin_percent),
        markup_adjusted_profit=money(markup_adjusted_profit),
        discount_ratio=ratio(discount_ratio),
        margin_warning=discount_ratio > markup_value,
        original_price=money(original),
        commission_rate=commission,
        commission_amount=money(commission_amount),
        net_profit_after_commission=money(net_profit - commission_amount),
        below_cost_floor=final_price < total_spend,
        lines=lines,
    )


def validate_margin(margin_percent: Any, final_price: Any, cost_total: Any, expense_total: Any) -> MarginValidation:
    margin = to_decimal(margin_percent)
    floor = to_decimal(cost_total) + to_decimal(expense_total)

    if to_decimal(final_price) < floor:
        return MarginValidation(
            is_valid=False,
            level="critical",
            message=f"Price cannot be lower than {money(floor)} (cost + expense).",
        )
    if margin < CRITICAL_MARGIN:
        return MarginValidation(
            is_valid=True,
            level="critical",
            message=f"Critical margin: {margin:.1f}%. A minimum margin of 10% is recommended.",
        )
    if margin < TARGET_MARGIN:
        return MarginValidation(
            is_valid=True,
            level="low",
            message=f"Low margin: {margin:.1f}%. A minimum margin of 20% is recommended.",
        )
    return MarginValidation(is_valid=True, level="acceptable", message=f"Acceptable margin: {margin:.1f}%")


def financial_health(cost_total: Any, expense_total: Any, price: Any, commission_rate: Any = 0) -> FinancialHealth:
    """Grade profitability after commission and compute the price that restores a 20% margin."""
    spend = to_decimal(cost_total) + to_decimal(expense_total)
    price_value = to_decimal(price)
    commission = commission_ratio(commission_rate)

    net = price_value - spend - price_value * commission
    margin = net / price_value * HUNDRED if price_value > 0 else ZERO

    # margin = 20% after commission  =>  price * (0.80 - commission) = spend
    denominator = (HUNDRED - TARGET_MARGIN) / HUNDRED - commission
    rescue_price = spend / denominator if denominator > 0 else price_value
    shortfall = rescue_price - price_value

    if margin >= TARGET_MARGIN:
        state, message = "healthy", "Solid margin for the operation."
    elif margin >= LOW_MARGIN:
        state = "warning"
        message = (
            f"Low margin: {margin:.1f}%. {money(shortfall)} short of a 20% margin; "
            f"consider adjusting the price to {money(rescue_price)}."
        )
    elif margin >= CRITICAL_MARGIN:
        state = "critical"
        message = f"Profitability compromised. Minimum recommended price: {money(rescue_price)}."
    else:
        state, message = "danger", "Operational risk: the price is below the safety limit."

    return FinancialHealth(
        state=state,
        margin_percent=money(margin),
        rescue_price=money(rescue_price),
        shortfall=money(shortfall),
        message=message,
    )


def courtesy_impact(items: Iterable[Any], courtesy_item_ids: Collection[Any]) -> CourtesyImpact:
    courtesy = set(courtesy_item_ids)
    courtesy_total = ZERO
    profit_impact = ZERO

    for item in _as_items(items):
        if item.item_id not in courtesy:
            continue
        item_price = item.list_price
        courtesy_total += item_price
        # Revenue given away; the item's own cost and expense are still paid.
        profit_impact -= item_price - to_decimal(item.cost) * item.quantity - to_decimal(item.expense) * item.quantity

    return CourtesyImpact(courtesy_total=money(courtesy_total), profit_impact=money(profit_impact))


def condition_terms(price: Any, condition: Any | None) -> ConditionTerms:
    """Apply a commercial condition's discount and advance-payment rule to a price."""
    price_value = to_decimal(price)
    if condition is None:
        return ConditionTerms(
            discount_amount=money(ZERO),
            total_due=money(price_value),
            advance_amount=money(ZERO),
            balance_due=money(price_value),
        )

    discount = price_value * to_decimal(getattr(condition, "discount_percentage", None)) / HUNDRED
    total_due = max(ZERO, price_value - discount)

    advance_type = getattr(condition, "advance_type", None) or AdvanceType.PERCENTAGE.value
    if advance_type == AdvanceType.FIXED_AMOUNT.value:
        advance = min(to_decimal(getattr(condition, "advance_amount", None)), total_due)
    else:
        advance = total_due * to_decimal(getattr(condition, "advance_percentage", None)) / HUNDRED

    return ConditionTerms(
        discount_amount=money(discount),
        total_due=money(total_due),
        advance_amount=money(advance),
        balance_due=money(total_due - advance),
    )
