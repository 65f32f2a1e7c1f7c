from __future__ import annotations

import pytest

from studio_pipeline.core.exceptions import NotFoundError
from studio_pipeline.pipeline.routing import RouteTarget
from studio_pipeline.services.route_service import RouteService


def test_resolve_reads_current_quotes(session, tenant, make_promise, make_quote):
    promise = make_promise()
    quote = make_quote(promise, status="pending")
    service = RouteService(db=session)

    assert service.resolve(promise.id, tenant.id).route is RouteTarget.PENDING

    quote.status = "negotiation"
    session.commit()
    resolved = service.resolve(promise.id, tenant.id)
    assert resolved.route is RouteTarget.NEGOTIATION
    assert resolved.path == f"/studio-demo/promise/{promise.id}/negotiation"


def test_validate_reports_stale_route(session, tenant, make_promise, make_quote):
    promise = make_promise()
    make_quote(promise, status="closing")

    valid, resolved = RouteService(db=session).validate(promise.id, tenant.id, "pending-view")

    assert valid is False
    assert resolved is RouteTarget.CLOSING


def test_validate_accepts_current_route(session, tenant, make_promise, make_quote):
    promise = make_promise()
    make_quote(promise, status="closing")

    assert RouteService(db=session).validate(promise.id, tenant.id, "closing-view")[0] is True


def test_resolve_for_other_tenant_raises(session, tenant, make_promise):
    promise = make_promise()
    with pytest.raises(NotFoundError):
        RouteService(db=session).resolve(promise.id, tenant.id + 1)
