"""Public route resolution for a promise from the aggregate state of its quotes.

Tiers are evaluated in priority order and the first tier with a matching quote
wins. Which quote matched never matters, only the tier, so the result is the
same for any ordering of the input.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from typing import Any

from studio_pipeline.models.enums import QuoteStatus
from studio_pipeline.pipeline.status import ProspectSelection, QuoteSnapshot, snapshot_all


class RouteTarget(str, enum.Enum):
    NEGOTIATION = "negotiation-view"
    CLOSING = "closing-view"
    PENDING = "pending-view"
    NO_MATCH = "no-match"


def _in_negotiation(quote: QuoteSnapshot) -> bool:
    return quote.status == QuoteStatus.NEGOTIATION.value and quote.selection is not ProspectSelection.SELECTED


def _in_closing(quote: QuoteSnapshot) -> bool:
    return quote.status == QuoteStatus.CLOSING.value


def _is_pending(quote: QuoteSnapshot) -> bool:
    return quote.status == QuoteStatus.PENDING.value


ROUTE_TIERS: tuple[tuple[RouteTarget, Callable[[QuoteSnapshot], bool]], ...] = (
    (RouteTarget.NEGOTIATION, _in_negotiation),
    (RouteTarget.CLOSING, _in_closing),
    (RouteTarget.PENDING, _is_pending),
)

ROUTE_SEGMENTS: dict[RouteTarget, str] = {
    RouteTarget.NEGOTIATION: "negotiation",
    RouteTarget.CLOSING: "closing",
    RouteTarget.PENDING: "pending",
}


def resolve_route(quotes: Iterable[Any]) -> RouteTarget:
    """Return the route tag a prospect should land on.

    Accepts `QuoteSnapshot` objects or rows exposing ``status`` and
    ``selected_by_prospect``. An empty or fully canceled list yields
    ``RouteTarget.NO_MATCH`` so callers render an explicit unavailable state.
    """
    snapshots = snapshot_all(quotes)
    for target, matches in ROUTE_TIERS:
        if any(matches(quote) for quote in snapshots):
            return target
    return RouteTarget.NO_MATCH


def is_route_valid(current_route: str | RouteTarget, quotes: Iterable[Any]) -> bool:
    """Check whether a client-held route tag is still what resolution would return."""
    try:
        route = RouteTarget(current_route)
    except ValueError:
        return False
    return resolve_route(quotes) is route


def build_route_path(tenant_key: str, promise_id: int, route: RouteTarget) -> str:
    base = f"/{tenant_key}/promise/{promise_id}"
    segment = ROUTE_SEGMENTS.get(route)
    if segment is None:
        return base
    return f"{base}/{segment}"
