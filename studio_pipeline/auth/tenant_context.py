"""Tenant context extraction and enforcement utilities."""

from __future__ import annotations

from dataclasses import dataclass

from studio_pipeline.core.exceptions import AuthorizationError


@dataclass(frozen=True)
class TenantContext:
    tenant_id: int
    actor_id: int | None = None


def _parse_id(raw: str | int | None, name: str) -> int | None:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise AuthorizationError(f"{name} must be an integer.") from exc
    if value < 1:
        raise AuthorizationError(f"{name} must be positive.")
    return value


def from_headers(tenant_header: str | int | None, user_header: str | int | None = None) -> TenantContext:
    """Build tenant context from the headers set by the upstream auth layer."""
    tenant_id = _parse_id(tenant_header, "X-Tenant-Id")
    if tenant_id is None:
        raise AuthorizationError("X-Tenant-Id header is required.")
    return TenantContext(tenant_id=tenant_id, actor_id=_parse_id(user_header, "X-User-Id"))

