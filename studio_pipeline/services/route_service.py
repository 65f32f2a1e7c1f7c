"""Public route lookups for a promise, read fresh on every call."""

from __future__ import annotations

from dataclasses import dataclass

from studio_pipeline.core.exceptions import NotFoundError
from studio_pipeline.database.db_handler import fetch_promise, fetch_quote_snapshots, fetch_tenant
from studio_pipeline.pipeline.routing import RouteTarget, build_route_path, is_route_valid, resolve_route
from studio_pipeline.services.base_service import BaseService


@dataclass(frozen=True)
class ResolvedRoute:
    route: RouteTarget
    path: str


class RouteService(BaseService):
    """Route results are never cached here: any quote mutation can change them."""

    def _tenant_key(self, promise_id: int, tenant_id: int) -> str:
        tenant = fetch_tenant(self.db, tenant_id)
        if tenant is None or fetch_promise(self.db, promise_id, tenant_id) is None:
            raise NotFoundError(f"Promise not found: {promise_id}")
        return tenant.tenant_key

    def resolve(self, promise_id: int, tenant_id: int) -> ResolvedRoute:
        tenant_key = self._tenant_key(promise_id, tenant_id)
        route = resolve_route(fetch_quote_snapshots(self.db, promise_id, tenant_id))
        return ResolvedRoute(route=route, path=build_route_path(tenant_key, promise_id, route))

    def validate(self, promise_id: int, tenant_id: int, current_route: str) -> tuple[bool, RouteTarget]:
        """Return whether ``current_route`` is still valid, plus the route it should be."""
        self._tenant_key(promise_id, tenant_id)
        snapshots = fetch_quote_snapshots(self.db, promise_id, tenant_id)
        return is_route_valid(current_route, snapshots), resolve_route(snapshots)
