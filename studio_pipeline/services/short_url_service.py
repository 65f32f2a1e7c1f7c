"""Keeps a promise's public short link pointing at its currently resolved route."""

from __future__ import annotations

import logging

from studio_pipeline.core.exceptions import NotFoundError
from studio_pipeline.database.db_handler import fetch_promise, fetch_quote_snapshots, fetch_short_url, fetch_tenant
from studio_pipeline.pipeline.routing import build_route_path, resolve_route
from studio_pipeline.services.base_service import BaseService

logger = logging.getLogger(__name__)


class ShortUrlService(BaseService):
    def sync_route(self, promise_id: int, tenant_id: int) -> tuple[bool, str]:
        """Return ``(updated, target_path)``; a promise without a short link yields ``(False, "")``."""
        tenant = fetch_tenant(self.db, tenant_id)
        promise = fetch_promise(self.db, promise_id, tenant_id)
        if tenant is None or promise is None:
            raise NotFoundError(f"Promise not found: {promise_id}")

        short_url = fetch_short_url(self.db, promise_id, tenant_id)
        if short_url is None:
            return False, ""

        route = resolve_route(fetch_quote_snapshots(self.db, promise_id, tenant_id))
        target_path = build_route_path(tenant.tenant_key, promise_id, route)
        if short_url.original_url == target_path:
            return False, target_path

        short_url.original_url = target_path
        self.commit()
        logger.info(
            "short_url.route_synced",
            extra={
                "event": "short_url.route_synced",
                "tenant_id": tenant_id,
                "promise_id": promise_id,
                "route": route.value,
            },
        )
        return True, target_path
