"""Quote status, selection and negotiation endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from studio_pipeline.api.v1._authz import raise_http, resolve_context
from studio_pipeline.core.exceptions import NotFoundError, ValidationError
from studio_pipeline.database.db import get_db
from studio_pipeline.orchestration.state_machine import InvalidTransitionError
from studio_pipeline.schemas.promises import SyncResponse
from studio_pipeline.schemas.quotes import (
    NegotiationApplyResponse,
    NegotiationPreviewResponse,
    NegotiationRequest,
    QuoteChangeResponse,
    QuoteResponse,
    QuoteSelectionUpdateRequest,
    QuoteStatusUpdateRequest,
)
from studio_pipeline.services.negotiation_service import NegotiationService
from studio_pipeline.services.quote_service import QuoteChangeResult, QuoteService

router = APIRouter(prefix="/quotes", tags=["quotes"])

_DOMAIN_ERRORS = (NotFoundError, ValidationError, InvalidTransitionError)


def _change_response(result: QuoteChangeResult) -> QuoteChangeResponse:
    return QuoteChangeResponse(
        quote=QuoteResponse.model_validate(result.quote),
        previous_status=result.previous_status,
        sync=SyncResponse.from_result(result.sync),
    )


@router.patch("/{quote_id}/status", response_model=QuoteChangeResponse)
def update_status(
    quote_id: int,
    payload: QuoteStatusUpdateRequest,
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> QuoteChangeResponse:
    context = resolve_context(x_tenant_id, x_user_id)
    try:
        result = QuoteService(db=db).change_status(
            quote_id, context.tenant_id, payload.status, actor_id=context.actor_id
        )
    except _DOMAIN_ERRORS as exc:
        raise_http(exc)
    return _change_response(result)


@router.patch("/{quote_id}/selection", response_model=QuoteChangeResponse)
def update_selection(
    quote_id: int,
    payload: QuoteSelectionUpdateRequest,
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> QuoteChangeResponse:
    context = resolve_context(x_tenant_id, x_user_id)
    try:
        result = QuoteService(db=db).set_prospect_selection(
            quote_id, context.tenant_id, payload.selected_by_prospect, actor_id=context.actor_id
        )
    except _DOMAIN_ERRORS as exc:
        raise_http(exc)
    return _change_response(result)


@router.post("/{quote_id}/negotiation/preview", response_model=NegotiationPreviewResponse)
def preview_negotiation(
    quote_id: int,
    payload: NegotiationRequest,
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    db: Session = Depends(get_db),
) -> NegotiationPreviewResponse:
    context = resolve_context(x_tenant_id)
    try:
        preview = NegotiationService(db=db).preview(
            quote_id, context.tenant_id, payload.manual_price, payload.courtesy_item_ids
        )
    except _DOMAIN_ERRORS as exc:
        raise_http(exc)
    return NegotiationPreviewResponse.model_validate(preview)


@router.post("/{quote_id}/negotiation", response_model=NegotiationApplyResponse)
def apply_negotiation(
    quote_id: int,
    payload: NegotiationRequest,
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-Id"),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> NegotiationApplyResponse:
    context = resolve_context(x_tenant_id, x_user_id)
    try:
        result = NegotiationService(db=db).apply(
            quote_id,
            context.tenant_id,
            manual_price=payload.manual_price,
            courtesy_item_ids=payload.courtesy_item_ids,
            notes=payload.notes,
            actor_id=context.actor_id,
        )
    except _DOMAIN_ERRORS as exc:
        raise_http(exc)
    return NegotiationApplyResponse(
        quote=QuoteResponse.model_validate(result.quote),
        preview=NegotiationPreviewResponse.model_validate(result.preview),
        sync=SyncResponse.from_result(result.sync),
    )
