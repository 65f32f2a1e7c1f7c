"""Promise routing, pipeline-sync and history endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from studio_pipeline.api.v1._authz import raise_http, resolve_context
from studio_pipeline.core.config import get_config
from studio_pipeline.core.exceptions import NotFoundError
from studio_pipeline.database.db import get_db
from studio_pipeline.database.db_handler import fetch_promise
from studio_pipeline.schemas.promises import (
    HistoryEntryResponse,
    RouteResponse,
    RouteValidationResponse,
    SyncResponse,
)
from studio_pipeline.services.pipeline_sync_service import PipelineSyncService
from studio_pipeline.services.route_service import RouteService
from studio_pipeline.services.status_history_service import StatusHistoryService

router = APIRouter(prefix="/promises", tags=["promises"])


@router.get("/{promise_id}/route", response_model=RouteResponse)
def get_route(
    promise_id: int,
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    db: Session = Depends(get_db),
) -> RouteResponse:
    context = resolve_context(x_tenant_id)
    try:
        resolved = RouteService(db=db).resolve(promise_id, context.tenant_id)
    except NotFoundError as exc:
        raise_http(exc)
    return RouteResponse(
        promise_id=promise_id,
        route=resolved.route.value,
        path=resolved.path,
        url=f"{get_config().PUBLIC_BASE_URL}{resolved.path}",
    )


@router.get("/{promise_id}/route/validate", response_model=RouteValidationResponse)
def validate_route(
    promise_id: int,
    route: str = Query(min_length=1, max_length=40),
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    db: Session = Depends(get_db),
) -> RouteValidationResponse:
    context = resolve_context(x_tenant_id)
    try:
        valid, resolved = RouteService(db=db).validate(promise_id, context.tenant_id, route)
    except NotFoundError as exc:
        raise_http(exc)
    return RouteValidationResponse(promise_id=promise_id, route=route, valid=valid, resolved=resolved.value)


@router.post("/{promise_id}/pipeline-sync", response_model=SyncResponse)
def sync_pipeline_stage(
    promise_id: int,
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> SyncResponse:
    context = resolve_context(x_tenant_id, x_user_id)
    result = PipelineSyncService(db=db).sync(promise_id, context.tenant_id, actor_id=context.actor_id)
    return SyncResponse.from_result(result)


@router.get("/{promise_id}/history", response_model=list[HistoryEntryResponse])
def list_history(
    promise_id: int,
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    db: Session = Depends(get_db),
) -> list[HistoryEntryResponse]:
    context = resolve_context(x_tenant_id)
    if fetch_promise(db, promise_id, context.tenant_id) is None:
        raise_http(NotFoundError(f"Promise not found: {promise_id}"))
    entries = StatusHistoryService(db=db).list_for_promise(promise_id, context.tenant_id)
    return [HistoryEntryResponse.model_validate(entry) for entry in entries]
