"""Shared tenant-context and error-mapping helpers for API v1 route modules."""

from __future__ import annotations

from fastapi import HTTPException, status

from studio_pipeline.auth.tenant_context import TenantContext, from_headers
from studio_pipeline.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from studio_pipeline.orchestration.state_machine import InvalidTransitionError


def map_domain_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, AuthorizationError):
        return status.HTTP_403_FORBIDDEN, str(exc)
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND, str(exc)
    if isinstance(exc, InvalidTransitionError):
        return status.HTTP_409_CONFLICT, str(exc)
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST, str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error."


def resolve_context(x_tenant_id: str | None, x_user_id: str | None = None) -> TenantContext:
    try:
        return from_headers(x_tenant_id, x_user_id)
    except AuthorizationError as exc:
        code, detail = map_domain_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc


def raise_http(exc: Exception) -> None:
    code, detail = map_domain_error(exc)
    raise HTTPException(status_code=code, detail=detail) from exc
