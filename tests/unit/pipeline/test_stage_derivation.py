from __future__ import annotations

import pytest

from studio_pipeline.models.enums import StageSlug
from studio_pipeline.pipeline.routing import RouteTarget, resolve_route
from studio_pipeline.pipeline.stages import STAGE_FALLBACKS, derive_target_stage, resolve_stage_slug
from studio_pipeline.pipeline.status import QuoteSnapshot

ALL_SLUGS = {slug.value for slug in StageSlug}


def _q(status, selected=None):
    return QuoteSnapshot.build(None, status, selected)


@pytest.mark.parametrize("status", ["approved", "authorized", "contract-pending", "contract-generated", "contract-signed"])
def test_approved_family_wins_over_everything(status):
    quotes = [_q("pending"), _q("negotiation", False), _q("closing", True), _q(status)]
    assert derive_target_stage(quotes) is StageSlug.APPROVED


def test_selected_closing_quote_derives_closing():
    assert derive_target_stage([_q("pending"), _q("closing", True)]) is StageSlug.CLOSING


def test_unselected_closing_quote_falls_to_default():
    assert derive_target_stage([_q("closing", False)]) is StageSlug.PENDING
    assert derive_target_stage([_q("closing", None)]) is StageSlug.PENDING


def test_unselected_negotiation_derives_negotiation():
    assert derive_target_stage([_q("pending"), _q("negotiation", None)]) is StageSlug.NEGOTIATION


def test_all_canceled_derives_canceled():
    assert derive_target_stage([_q("canceled"), _q("canceled")]) is StageSlug.CANCELED


def test_mixed_canceled_and_pending_is_pending():
    assert derive_target_stage([_q("canceled"), _q("pending")]) is StageSlug.PENDING


def test_empty_list_defaults_differ_between_stage_and_route():
    assert derive_target_stage([]) is StageSlug.PENDING
    assert resolve_route([]) is RouteTarget.NO_MATCH


def test_pending_scenario_matches_route():
    quotes = [_q("pending")]
    assert derive_target_stage(quotes) is StageSlug.PENDING
    assert resolve_route(quotes) is RouteTarget.PENDING


def test_resolve_prefers_configured_target():
    assert resolve_stage_slug(StageSlug.CLOSING, ALL_SLUGS) == ("closing", False)


def test_fallback_table_is_applied_when_target_missing():
    assert STAGE_FALLBACKS[StageSlug.CLOSING] is StageSlug.NEGOTIATION
    assert resolve_stage_slug(StageSlug.CLOSING, ALL_SLUGS - {"closing"}) == ("negotiation", True)
    assert resolve_stage_slug(StageSlug.CANCELED, ALL_SLUGS - {"canceled"}) == ("pending", True)


def test_resolve_returns_none_without_target_or_fallback():
    assert resolve_stage_slug(StageSlug.APPROVED, ALL_SLUGS - {"approved"}) == (None, False)
    assert resolve_stage_slug(StageSlug.CLOSING, {"pending"}) == (None, False)
