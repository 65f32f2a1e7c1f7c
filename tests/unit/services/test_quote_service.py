from __future__ import annotations

import logging

import pytest

from studio_pipeline.core.exceptions import NotFoundError, ValidationError
from studio_pipeline.orchestration.state_machine import InvalidTransitionError
from studio_pipeline.services import pipeline_sync_service
from studio_pipeline.services.pipeline_sync_service import SyncErrorCode, SyncOutcome
from studio_pipeline.services.quote_service import QuoteService


def test_change_status_normalizes_alias_and_syncs_stage(session, tenant, stages, make_promise, make_quote):
    promise = make_promise(stage=stages["pending"])
    quote = make_quote(promise, status="pending", selected=True)

    result = QuoteService(db=session).change_status(quote.id, tenant.id, "en_cierre")

    assert result.quote.status == "closing"
    assert result.previous_status == "pending"
    assert result.sync.outcome is SyncOutcome.UPDATED
    session.refresh(promise)
    assert promise.pipeline_stage_id == stages["closing"].id


def test_change_status_rejects_unknown_status(session, tenant, stages, make_promise, make_quote):
    quote = make_quote(make_promise())

    with pytest.raises(ValidationError):
        QuoteService(db=session).change_status(quote.id, tenant.id, "on-hold")


def test_change_status_rejects_disallowed_transition(session, tenant, stages, make_promise, make_quote):
    quote = make_quote(make_promise(), status="contract-signed")

    with pytest.raises(InvalidTransitionError):
        QuoteService(db=session).change_status(quote.id, tenant.id, "pending")


def test_change_status_for_missing_quote(session, tenant, stages):
    with pytest.raises(NotFoundError):
        QuoteService(db=session).change_status(42, tenant.id, "pending")


def test_selecting_quote_deselects_siblings(session, tenant, stages, make_promise, make_quote):
    promise = make_promise()
    first = make_quote(promise, status="closing", selected=True)
    second = make_quote(promise, status="closing", selected=None)

    result = QuoteService(db=session).set_prospect_selection(second.id, tenant.id, True)

    session.refresh(first)
    assert first.selected_by_prospect is False
    assert result.quote.selected_by_prospect is True
    assert result.sync.resolved_slug == "closing"


def test_clearing_selection_keeps_tri_state(session, tenant, stages, make_promise, make_quote):
    promise = make_promise()
    quote = make_quote(promise, status="negotiation", selected=True)

    result = QuoteService(db=session).set_prospect_selection(quote.id, tenant.id, None)

    assert result.quote.selected_by_prospect is None
    assert result.sync.resolved_slug == "negotiation"


def test_status_change_updates_short_url(session, tenant, stages, make_promise, make_quote, make_short_url):
    promise = make_promise()
    quote = make_quote(promise, status="pending")
    short_url = make_short_url(promise)

    QuoteService(db=session).change_status(quote.id, tenant.id, "negotiation")

    session.refresh(short_url)
    assert short_url.original_url == f"/studio-demo/promise/{promise.id}/negotiation"


def test_failed_sync_does_not_undo_status_change(session, tenant, make_promise, make_quote):
    promise = make_promise()
    quote = make_quote(promise, status="pending")

    result = QuoteService(db=session).change_status(quote.id, tenant.id, "approved")

    assert result.sync.outcome is SyncOutcome.SKIPPED
    session.refresh(quote)
    assert quote.status == "approved"


def test_list_snapshots_skips_archived_quotes(session, tenant, stages, make_promise, make_quote):
    promise = make_promise()
    live = make_quote(promise, status="cierre", selected=True)
    make_quote(promise, status="approved", archived=True)

    snapshots = QuoteService(db=session).list_snapshots(promise.id, tenant.id)

    assert [(s.quote_id, s.status, s.is_selected) for s in snapshots] == [(live.id, "closing", True)]


def test_stage_read_error_during_sync_keeps_status_change(session, tenant, stages, make_promise, make_quote, monkeypatch):
    promise = make_promise(stage=stages["pending"])
    quote = make_quote(promise, status="pending")

    def _unavailable(db, tenant_id):
        raise RuntimeError("stage catalog unavailable")

    monkeypatch.setattr(pipeline_sync_service, "fetch_active_stages", _unavailable)
    result = QuoteService(db=session).change_status(quote.id, tenant.id, "approved")

    assert result.sync.outcome is SyncOutcome.FAILED
    assert result.sync.error.code is SyncErrorCode.PERSISTENCE_FAILED
    session.refresh(quote)
    assert quote.status == "approved"


def test_legacy_status_can_recover_to_pending_or_canceled(session, tenant, stages, make_promise, make_quote):
    promise = make_promise()
    service = QuoteService(db=session)

    recovered = make_quote(promise, status="on-hold")
    assert service.change_status(recovered.id, tenant.id, "pending").quote.status == "pending"

    dropped = make_quote(promise, status="on-hold")
    assert service.change_status(dropped.id, tenant.id, "canceled").quote.status == "canceled"

    stuck = make_quote(promise, status="on-hold")
    with pytest.raises(InvalidTransitionError):
        service.change_status(stuck.id, tenant.id, "approved")


def test_status_change_log_carries_quote_and_promise_ids(session, tenant, stages, make_promise, make_quote, caplog):
    promise = make_promise()
    quote = make_quote(promise, status="pending")
    caplog.set_level(logging.INFO, logger="studio_pipeline.services.quote_service")

    QuoteService(db=session).change_status(quote.id, tenant.id, "negotiation", actor_id=7)

    record = next(r for r in caplog.records if r.getMessage() == "quote.status.updated")
    assert record.quote_id == quote.id
    assert record.promise_id == promise.id
    assert record.tenant_id == tenant.id
    assert record.actor_id == 7
    assert record.to_status == "negotiation"
